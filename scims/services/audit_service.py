"""
Audit logging service for platform-wide admin actions.
"""
import logging

from scims.models import AdminAuditLog, AdminAuditAction

logger = logging.getLogger(__name__)


def log_cleanup(session, actor_user_id: str, report: dict, ip_address: str = None):
    """
    Record a completed database cleanup in the admin audit trail.

    Args:
        session: Database session
        actor_user_id: Superadmin who ran the cleanup
        report: Cleanup report (its summary and failing steps are stored)
        ip_address: Caller IP, when run over HTTP

    Returns:
        AdminAuditLog or None if it could not be written
    """
    failed_steps = sorted(
        name for name, result in report.get('results', {}).items() if result.get('error')
    )
    details = dict(report.get('summary', {}))
    details['failedSteps'] = failed_steps

    try:
        entry = AdminAuditLog.log_action(
            actor_user_id=actor_user_id,
            action=AdminAuditAction.DATABASE_CLEANUP,
            details=details,
            ip_address=ip_address
        )
        session.add(entry)
        session.commit()

        logger.info(f"Audit log created: {AdminAuditAction.DATABASE_CLEANUP} by user {actor_user_id}")
        return entry

    except Exception as e:
        session.rollback()
        logger.error(f"Failed to create audit log: {e}")
        # Cleanup already happened; its report stands
        return None
