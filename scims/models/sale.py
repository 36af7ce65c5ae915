"""Sales-side models: customers, sales, carts and storefront orders."""
from sqlalchemy import Column, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class Customer(Base):
    """Customer (cliente) registered at a store."""

    __tablename__ = 'customer'

    id = Column(String(36), primary_key=True, default=generate_id)
    store_id = Column(String(36), ForeignKey('store.id'), nullable=False)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Customer(id='{self.id}', name='{self.name}')>"


class Sale(Base):
    """Sale (venta confirmada)."""

    __tablename__ = 'sale'

    id = Column(String(36), primary_key=True, default=generate_id)
    store_id = Column(String(36), ForeignKey('store.id'), nullable=False)
    customer_id = Column(String(36), ForeignKey('customer.id'), nullable=True)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    items = relationship('SaleItem', back_populates='sale')

    def __repr__(self):
        return f"<Sale(id='{self.id}', total={self.total})>"


class SaleItem(Base):
    """Sale Item (detalle de venta)."""

    __tablename__ = 'sale_item'

    id = Column(String(36), primary_key=True, default=generate_id)
    sale_id = Column(String(36), ForeignKey('sale.id'), nullable=False)
    product_id = Column(String(36), ForeignKey('product.id'), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False, default=0)

    # Relationships
    sale = relationship('Sale', back_populates='items')


class SavedCart(Base):
    """Cart parked at the POS to be resumed later."""

    __tablename__ = 'saved_cart'

    id = Column(String(36), primary_key=True, default=generate_id)
    store_id = Column(String(36), ForeignKey('store.id'), nullable=False)
    customer_id = Column(String(36), ForeignKey('customer.id'), nullable=True)
    items = Column(Text, nullable=True)  # JSON snapshot of cart lines
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PublicOrder(Base):
    """Order placed through a business storefront."""

    __tablename__ = 'public_order'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    customer_name = Column(String(200), nullable=True)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default='pending')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
