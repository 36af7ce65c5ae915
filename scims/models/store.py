"""Store model - a location owned by exactly one business."""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class Store(Base):
    """Store (sub-tenant of a business)."""

    __tablename__ = 'store'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    name = Column(String(200), nullable=False)
    address = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    business = relationship('Business', back_populates='stores')

    def __repr__(self):
        return f"<Store(id='{self.id}', business_id='{self.business_id}', name='{self.name}')>"
