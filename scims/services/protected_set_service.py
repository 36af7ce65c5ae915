"""
Protected-set resolution for the database cleanup.

Computes the identifiers that must survive a cleanup run:
- demo businesses (well-known ID or a name matching the demo pattern, active only)
- demo stores (every store of a demo business)
- privileged accounts (every superadmin, platform-wide)
"""
import logging
from dataclasses import dataclass
from typing import FrozenSet

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from scims.exceptions import ProtectedSetResolutionError
from scims.models import Business, Store, AppUser, UserRoleName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProtectedSets:
    """Identifiers excluded from every cleanup step."""

    demo_business_ids: FrozenSet[str]
    demo_store_ids: FrozenSet[str]
    superadmin_user_ids: FrozenSet[str]
    superadmin_role: str = UserRoleName.SUPERADMIN


def resolve_demo_business_ids(session, demo_business_id: str, name_pattern: str = 'demo') -> FrozenSet[str]:
    """
    Active businesses that are the demo business or are named like one.

    Falls back to {demo_business_id} when the query fails or matches
    nothing, so the result is never empty.
    """
    try:
        rows = session.query(Business.id).filter(
            or_(
                Business.id == demo_business_id,
                Business.name.ilike(f'%{name_pattern}%')
            ),
            Business.is_active.is_(True)
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching demo businesses, using fallback ID: {e}")
        session.rollback()
        return frozenset([demo_business_id])

    ids = frozenset(row.id for row in rows)
    if not ids:
        logger.warning("No active demo business found, using fallback ID")
        return frozenset([demo_business_id])
    return ids


def resolve_demo_store_ids(session, demo_business_ids, demo_store_id: str) -> FrozenSet[str]:
    """
    Stores owned by any demo business.

    Falls back to {demo_store_id} when the query fails or matches nothing.
    """
    try:
        rows = session.query(Store.id).filter(
            Store.business_id.in_(list(demo_business_ids))
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching demo stores, using fallback ID: {e}")
        session.rollback()
        return frozenset([demo_store_id])

    ids = frozenset(row.id for row in rows)
    if not ids:
        logger.warning("No demo store found, using fallback ID")
        return frozenset([demo_store_id])
    return ids


def resolve_superadmin_user_ids(session, superadmin_role: str = UserRoleName.SUPERADMIN) -> FrozenSet[str]:
    """
    Every account holding the privileged role, regardless of business.

    Raises:
        ProtectedSetResolutionError: If the accounts cannot be read. An
            empty set here would leave superadmins unprotected.
    """
    try:
        rows = session.query(AppUser.id).filter(AppUser.role == superadmin_role).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching superadmin accounts: {e}")
        session.rollback()
        raise ProtectedSetResolutionError(
            'Could not resolve superadmin accounts; cleanup aborted before deleting anything.'
        ) from e

    return frozenset(row.id for row in rows)


def resolve_protected_sets(session, config) -> ProtectedSets:
    """
    Resolve all protected identifiers once, before any deletion.

    Args:
        session: SQLAlchemy session
        config: Mapping with DEMO_BUSINESS_ID, DEMO_STORE_ID and optionally
            DEMO_NAME_PATTERN and SUPERADMIN_ROLE (e.g. app.config)

    Returns:
        ProtectedSets
    """
    superadmin_role = config.get('SUPERADMIN_ROLE', UserRoleName.SUPERADMIN)

    demo_business_ids = resolve_demo_business_ids(
        session,
        config['DEMO_BUSINESS_ID'],
        config.get('DEMO_NAME_PATTERN', 'demo')
    )
    demo_store_ids = resolve_demo_store_ids(session, demo_business_ids, config['DEMO_STORE_ID'])
    superadmin_user_ids = resolve_superadmin_user_ids(session, superadmin_role)

    logger.info(
        f"Protected sets resolved: {len(demo_business_ids)} demo businesses, "
        f"{len(demo_store_ids)} demo stores, {len(superadmin_user_ids)} superadmins"
    )

    return ProtectedSets(
        demo_business_ids=demo_business_ids,
        demo_store_ids=demo_store_ids,
        superadmin_user_ids=superadmin_user_ids,
        superadmin_role=superadmin_role,
    )
