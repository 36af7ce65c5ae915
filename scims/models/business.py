"""Business model - the tenant that owns every partition of platform data."""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class Business(Base):
    """Business model - each organization using the platform."""

    __tablename__ = 'business'

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=False)  # Display name, also used to spot demo tenants
    email = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    stores = relationship('Store', back_populates='business')

    def __repr__(self):
        return f"<Business(id='{self.id}', name='{self.name}')>"
