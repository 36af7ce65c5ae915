"""Per-business and per-store settings, activity logs and notifications."""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from scims.database import Base, generate_id


class BusinessSetting(Base):
    """Key/value setting of a business."""

    __tablename__ = 'business_setting'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    key = Column(String(100), nullable=False)
    value = Column(Text, nullable=True)


class StoreSetting(Base):
    """Key/value setting of a store."""

    __tablename__ = 'store_setting'

    id = Column(String(36), primary_key=True, default=generate_id)
    store_id = Column(String(36), ForeignKey('store.id'), nullable=False)
    key = Column(String(100), nullable=False)
    value = Column(Text, nullable=True)


class ActivityLog(Base):
    """Business-scoped record of user activity."""

    __tablename__ = 'activity_log'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    user_id = Column(String(36), ForeignKey('app_user.id'), nullable=True)
    action = Column(String(100), nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Notification(Base):
    """In-app notification addressed to a business (optionally one user)."""

    __tablename__ = 'notification'

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('business.id'), nullable=False)
    user_id = Column(String(36), ForeignKey('app_user.id'), nullable=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
