"""Models package - exports all SQLAlchemy models."""
# Platform Core Models
from scims.models.business import Business
from scims.models.store import Store
from scims.models.app_user import AppUser, UserRoleName
from scims.models.role import Role, UserRole, UserBusinessRole

# Business Models
from scims.models.catalog import Category, Brand, Supplier, Product
from scims.models.discount import Coupon, CouponUsage, Promotion, PromotionUsage
from scims.models.sale import Customer, Sale, SaleItem, SavedCart, PublicOrder
from scims.models.supply import (
    SupplyOrder, SupplyOrderItem, SupplyPayment,
    SupplyReturn, SupplyReturnItem, RestockOrder, RestockItem
)
from scims.models.settings import BusinessSetting, StoreSetting, ActivityLog, Notification

# Admin
from scims.models.admin_audit import AdminAuditLog, AuditAction as AdminAuditAction

__all__ = [
    # Platform Core
    'Business', 'Store', 'AppUser', 'UserRoleName', 'Role', 'UserRole', 'UserBusinessRole',
    # Business
    'Category', 'Brand', 'Supplier', 'Product',
    'Coupon', 'CouponUsage', 'Promotion', 'PromotionUsage',
    'Customer', 'Sale', 'SaleItem', 'SavedCart', 'PublicOrder',
    'SupplyOrder', 'SupplyOrderItem', 'SupplyPayment',
    'SupplyReturn', 'SupplyReturnItem', 'RestockOrder', 'RestockItem',
    'BusinessSetting', 'StoreSetting', 'ActivityLog', 'Notification',
    # Admin
    'AdminAuditLog', 'AdminAuditAction',
]
