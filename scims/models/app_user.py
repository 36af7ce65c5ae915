"""AppUser model - platform accounts, global and not bound to a business."""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class UserRoleName:
    """Values of AppUser.role."""
    SUPERADMIN = 'superadmin'
    BUSINESS_ADMIN = 'business_admin'
    STORE_ADMIN = 'store_admin'
    CASHIER = 'cashier'


class AppUser(Base):
    """AppUser model - platform accounts.

    IMPORTANT: Accounts have NO business_id. Membership in a business is
    expressed through UserRole / UserBusinessRole rows, and superadmins
    operate globally across all businesses.
    """

    __tablename__ = 'app_user'

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), nullable=False, unique=True)
    username = Column(String(100), nullable=True)
    name = Column(String(200), nullable=True)
    role = Column(String(30), nullable=False, default=UserRoleName.CASHIER)
    is_active = Column(Boolean, nullable=False, default=True)
    is_demo = Column(Boolean, nullable=False, default=False)  # Weaker protection than role
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<AppUser(id='{self.id}', email='{self.email}', role='{self.role}')>"
