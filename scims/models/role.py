"""Role definitions and the join tables assigning them to accounts."""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class Role(Base):
    """Business-specific role definition."""

    __tablename__ = 'role'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    business = relationship('Business')

    def __repr__(self):
        return f"<Role(id='{self.id}', name='{self.name}')>"


class UserRole(Base):
    """Links an account to a business role."""

    __tablename__ = 'user_role'

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey('app_user.id'), nullable=False)
    role_id = Column(String(36), ForeignKey('role.id'), nullable=False)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)

    # Relationships
    user = relationship('AppUser')
    role = relationship('Role')

    def __repr__(self):
        return f"<UserRole(user_id='{self.user_id}', business_id='{self.business_id}')>"


class UserBusinessRole(Base):
    """Account membership in a business (business_id may be null for platform roles)."""

    __tablename__ = 'user_business_role'

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey('app_user.id'), nullable=False)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=True)
    role_id = Column(String(36), ForeignKey('role.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user = relationship('AppUser')

    def __repr__(self):
        return f"<UserBusinessRole(user_id='{self.user_id}', business_id='{self.business_id}')>"
