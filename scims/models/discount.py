"""Coupons, promotions and their usage tracking rows."""
from sqlalchemy import Column, String, Numeric, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class Coupon(Base):
    """Discount coupon."""

    __tablename__ = 'coupon'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    code = Column(String(50), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Coupon(id='{self.id}', code='{self.code}')>"


class CouponUsage(Base):
    """One redemption of a coupon (no business column of its own)."""

    __tablename__ = 'coupon_usage'

    id = Column(String(36), primary_key=True, default=generate_id)
    coupon_id = Column(String(36), ForeignKey('coupon.id'), nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    used_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Promotion(Base):
    """Automatic promotion."""

    __tablename__ = 'promotion'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    name = Column(String(200), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Promotion(id='{self.id}', name='{self.name}')>"


class PromotionUsage(Base):
    """One application of a promotion."""

    __tablename__ = 'promotion_usage'

    id = Column(String(36), primary_key=True, default=generate_id)
    promotion_id = Column(String(36), ForeignKey('promotion.id'), nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    used_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
