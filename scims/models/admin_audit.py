"""
Admin audit log model for tracking sensitive platform-wide admin actions.
"""
from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from scims.database import Base


class AdminAuditLog(Base):
    """
    Audit trail for all sensitive admin actions.

    Lives outside every business partition so that a database cleanup
    never removes its own record.
    """
    __tablename__ = 'admin_audit_logs'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)

    # Who performed the action (superadmin accounts are never purged)
    actor_user_id = Column(String(36), ForeignKey('app_user.id'), nullable=False)

    # What action was performed
    action = Column(String(100), nullable=False)

    # Additional details in JSON format
    details = Column(JSON().with_variant(JSONB, 'postgresql'), nullable=True)

    # Network information
    ip_address = Column(String(45), nullable=True)

    # When it happened
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    actor = relationship('AppUser', foreign_keys=[actor_user_id])

    def __repr__(self):
        return f'<AdminAuditLog id={self.id} action={self.action} actor_id={self.actor_user_id}>'

    @staticmethod
    def log_action(actor_user_id, action, details=None, ip_address=None):
        """
        Helper method to create audit log entries.

        Args:
            actor_user_id: ID of the superadmin performing the action
            action: Action type (e.g., 'DATABASE_CLEANUP')
            details: Optional dict with additional context
            ip_address: Optional IP address of the caller

        Returns:
            AdminAuditLog instance (not committed)
        """
        return AdminAuditLog(
            actor_user_id=actor_user_id,
            action=action,
            details=details,
            ip_address=ip_address
        )


class AuditAction:
    """Constants for audited admin actions."""
    DATABASE_CLEANUP = 'DATABASE_CLEANUP'
