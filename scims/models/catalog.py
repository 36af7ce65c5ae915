"""Catalog models: categories, brands, suppliers and products."""
from sqlalchemy import Column, String, Text, Boolean, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class Category(Base):
    """Product Category."""

    __tablename__ = 'category'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Category(id='{self.id}', name='{self.name}')>"


class Brand(Base):
    """Product Brand."""

    __tablename__ = 'brand'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Brand(id='{self.id}', name='{self.name}')>"


class Supplier(Base):
    """Supplier (proveedor)."""

    __tablename__ = 'supplier'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Supplier(id='{self.id}', name='{self.name}')>"


class Product(Base):
    """Product model."""

    __tablename__ = 'product'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    category_id = Column(String(36), ForeignKey('category.id'), nullable=True)
    brand_id = Column(String(36), ForeignKey('brand.id'), nullable=True)
    supplier_id = Column(String(36), ForeignKey('supplier.id'), nullable=True)
    name = Column(String, nullable=False)
    sku = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    category = relationship('Category', foreign_keys=[category_id])

    def __repr__(self):
        return f"<Product(id='{self.id}', name='{self.name}', sku='{self.sku}')>"
