"""Supply chain models: supply orders, payments, returns and restocks."""
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class SupplyOrder(Base):
    """Purchase order placed with a supplier for one store."""

    __tablename__ = 'supply_order'

    id = Column(String(36), primary_key=True, default=generate_id)
    store_id = Column(String(36), ForeignKey('store.id'), nullable=False)
    supplier_id = Column(String(36), ForeignKey('supplier.id'), nullable=True)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default='pending')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SupplyOrderItem(Base):
    """Line of a supply order."""

    __tablename__ = 'supply_order_item'

    id = Column(String(36), primary_key=True, default=generate_id)
    supply_order_id = Column(String(36), ForeignKey('supply_order.id'), nullable=False)
    product_id = Column(String(36), ForeignKey('product.id'), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False, default=1)
    unit_cost = Column(Numeric(14, 4), nullable=False, default=0)


class SupplyPayment(Base):
    """Payment registered against a supply order."""

    __tablename__ = 'supply_payment'

    id = Column(String(36), primary_key=True, default=generate_id)
    supply_order_id = Column(String(36), ForeignKey('supply_order.id'), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    paid_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SupplyReturn(Base):
    """Goods returned to a supplier."""

    __tablename__ = 'supply_return'

    id = Column(String(36), primary_key=True, default=generate_id)
    store_id = Column(String(36), ForeignKey('store.id'), nullable=False)
    supply_order_id = Column(String(36), ForeignKey('supply_order.id'), nullable=True)
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SupplyReturnItem(Base):
    """Line of a supply return."""

    __tablename__ = 'supply_return_item'

    id = Column(String(36), primary_key=True, default=generate_id)
    supply_return_id = Column(String(36), ForeignKey('supply_return.id'), nullable=False)
    product_id = Column(String(36), ForeignKey('product.id'), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False, default=1)


class RestockOrder(Base):
    """Internal restock request for a store."""

    __tablename__ = 'restock_order'

    id = Column(String(36), primary_key=True, default=generate_id)
    store_id = Column(String(36), ForeignKey('store.id'), nullable=False)
    status = Column(String(20), nullable=False, default='pending')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RestockItem(Base):
    """Line of a restock order."""

    __tablename__ = 'restock_item'

    id = Column(String(36), primary_key=True, default=generate_id)
    restock_order_id = Column(String(36), ForeignKey('restock_order.id'), nullable=False)
    product_id = Column(String(36), ForeignKey('product.id'), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False, default=1)
