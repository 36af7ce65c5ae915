"""
Database cleanup service - removes all non-demo data from the platform.

Every step deletes explicitly, children before parents, and never relies on
the database cascading deletes. Each step reports {'deleted': n} or
{'deleted': 0, 'error': message}; a failing step never stops the run.

Protected rows (see protected_set_service):
- rows of demo businesses and demo stores
- superadmin accounts, their role assignments and what those point at
- accounts still referenced by a demo business
"""
import logging
from functools import wraps
from typing import Dict, Optional

from scims.services.cleanup_report import build_cleanup_report
from scims.services.protected_set_service import ProtectedSets, resolve_protected_sets
from scims.services.purge_store import PurgeStore, DEFAULT_BATCH_SIZE

logger = logging.getLogger(__name__)

ASSIGNMENT_TABLES = ('user_role', 'user_business_role')

# Business-scoped tables with a nullable account reference
USER_REFERENCE_TABLES = ('activity_log', 'notification')


def captures_errors(handler):
    """Turn any exception raised by a step into that step's error result."""
    @wraps(handler)
    def wrapper(store, protected, **options):
        try:
            return handler(store, protected, **options)
        except Exception as e:
            # DB-API message only, without the statement and its parameters
            return {'deleted': 0, 'error': str(getattr(e, 'orig', None) or e) or e.__class__.__name__}
    return wrapper


def _is_demo_row(row: dict, protected: ProtectedSets, business_column=None, store_column=None) -> bool:
    if business_column and row.get(business_column) in protected.demo_business_ids:
        return True
    if store_column and row.get(store_column) in protected.demo_store_ids:
        return True
    return False


def select_non_demo_ids(
    store: PurgeStore,
    protected: ProtectedSets,
    table: str,
    business_column: Optional[str] = None,
    store_column: Optional[str] = None
) -> list:
    """IDs of rows in `table` that belong to neither a demo business nor a demo store."""
    columns = ['id'] + [c for c in (business_column, store_column) if c]
    rows = store.fetch(table, columns)
    return [
        row['id'] for row in rows
        if not _is_demo_row(row, protected, business_column, store_column)
    ]


def _delete(store: PurgeStore, table: str, ids: list) -> dict:
    if not ids:
        return {'deleted': 0}
    return {'deleted': store.delete_ids(table, ids)}


@captures_errors
def delete_excluding_demo(
    store: PurgeStore,
    protected: ProtectedSets,
    table: str,
    business_column: Optional[str] = None,
    store_column: Optional[str] = None
) -> dict:
    """
    Delete every row of a business- or store-scoped table except demo rows.

    Args:
        store: PurgeStore
        protected: Resolved protected sets
        table: Table name
        business_column: Column holding the business FK, if any
        store_column: Column holding the store FK, if any

    Returns:
        {'deleted': number of ids submitted} or {'deleted': 0, 'error': ...}
    """
    ids = select_non_demo_ids(store, protected, table, business_column, store_column)
    return _delete(store, table, ids)


@captures_errors
def delete_via_parent(
    store: PurgeStore,
    protected: ProtectedSets,
    child_table: str,
    parent_id_column: str,
    parent_table: str,
    parent_business_column: Optional[str] = None,
    parent_store_column: Optional[str] = None
) -> dict:
    """
    Delete rows of a table that only reaches a business through a parent.

    The parent table is read (not modified) to find its non-demo IDs; child
    rows pointing at those parents are deleted.
    """
    parent_ids = select_non_demo_ids(
        store, protected, parent_table, parent_business_column, parent_store_column
    )
    if not parent_ids:
        return {'deleted': 0}

    ids = []
    for start in range(0, len(parent_ids), store.batch_size):
        batch = parent_ids[start:start + store.batch_size]
        rows = store.fetch(child_table, ['id'], where_in={parent_id_column: batch})
        ids.extend(row['id'] for row in rows)

    return _delete(store, child_table, ids)


@captures_errors
def delete_role_assignments(store: PurgeStore, protected: ProtectedSets, table: str) -> dict:
    """Delete user/business role rows unless the business is demo or the user a superadmin."""
    rows = store.fetch(table, ['id', 'user_id', 'business_id'])
    ids = [
        row['id'] for row in rows
        if row['business_id'] not in protected.demo_business_ids
        and row['user_id'] not in protected.superadmin_user_ids
    ]
    return _delete(store, table, ids)


@captures_errors
def delete_stores(store: PurgeStore, protected: ProtectedSets) -> dict:
    """Delete stores that are not demo stores and do not belong to a demo business."""
    rows = store.fetch('store', ['id', 'business_id'])
    ids = [
        row['id'] for row in rows
        if row['id'] not in protected.demo_store_ids
        and row['business_id'] not in protected.demo_business_ids
    ]
    return _delete(store, 'store', ids)


def _assigned_values(store: PurgeStore, column: str, where_column: str, values, tables=ASSIGNMENT_TABLES) -> set:
    """Distinct non-null `column` values of rows whose `where_column` is in `values`."""
    found = set()
    for table in tables:
        rows = store.fetch(table, [column], where_in={where_column: values})
        found.update(row[column] for row in rows if row[column] is not None)
    return found


def _kept_assignment_values(store: PurgeStore, protected: ProtectedSets, column: str) -> set:
    """`column` values of the assignment rows the cleanup keeps (demo business or superadmin)."""
    found = _assigned_values(store, column, 'business_id', protected.demo_business_ids)
    found |= _assigned_values(store, column, 'user_id', protected.superadmin_user_ids)
    return found


@captures_errors
def delete_roles(store: PurgeStore, protected: ProtectedSets) -> dict:
    """Delete non-demo role definitions that no kept assignment points at."""
    held = _kept_assignment_values(store, protected, 'role_id')
    ids = [
        role_id for role_id in select_non_demo_ids(store, protected, 'role', business_column='business_id')
        if role_id not in held
    ]
    return _delete(store, 'role', ids)


@captures_errors
def delete_users(store: PurgeStore, protected: ProtectedSets) -> dict:
    """
    Delete accounts that are neither superadmins, demo accounts, nor
    referenced by a demo business (role assignments, activity logs,
    notifications).
    """
    demo_members = _assigned_values(store, 'user_id', 'business_id', protected.demo_business_ids)
    demo_members |= _assigned_values(
        store, 'user_id', 'business_id', protected.demo_business_ids, tables=USER_REFERENCE_TABLES
    )

    rows = store.fetch('app_user', ['id', 'role', 'is_demo'])
    ids = []
    for row in rows:
        # Never delete superadmin users
        if row['role'] == protected.superadmin_role or row['id'] in protected.superadmin_user_ids:
            continue
        # Never delete demo users
        if row['is_demo'] or row['id'] in demo_members:
            continue
        ids.append(row['id'])

    # Final safety check right before the delete call
    safe_ids = [user_id for user_id in ids if user_id not in protected.superadmin_user_ids]
    return _delete(store, 'app_user', safe_ids)


@captures_errors
def delete_businesses(store: PurgeStore, protected: ProtectedSets) -> dict:
    """
    Delete non-demo businesses. Runs last: every other step filters on
    business identifiers that must remain valid until here.
    """
    # Superadmin assignments are kept, so are their businesses and those of
    # every role a kept assignment holds
    pinned = _assigned_values(store, 'business_id', 'user_id', protected.superadmin_user_ids)
    held_roles = _kept_assignment_values(store, protected, 'role_id')
    pinned.update(
        row['business_id'] for row in store.fetch('role', ['business_id'], where_in={'id': held_roles})
    )

    rows = store.fetch('business', ['id'])
    ids = [
        row['id'] for row in rows
        if row['id'] not in protected.demo_business_ids and row['id'] not in pinned
    ]
    return _delete(store, 'business', ids)


def _by_business(table):
    return delete_excluding_demo, {'table': table, 'business_column': 'business_id'}


def _by_store(table):
    return delete_excluding_demo, {'table': table, 'store_column': 'store_id'}


def _via_parent(child_table, parent_id_column, parent_table, scope):
    options = {
        'child_table': child_table,
        'parent_id_column': parent_id_column,
        'parent_table': parent_table,
    }
    if scope == 'business':
        options['parent_business_column'] = 'business_id'
    else:
        options['parent_store_column'] = 'store_id'
    return delete_via_parent, options


# Order matters: children before parents, businesses last.
CLEANUP_STEPS = (
    # 1. Usage tracking, reachable only through coupon/promotion
    ('coupon_usage', *_via_parent('coupon_usage', 'coupon_id', 'coupon', 'business')),
    ('promotion_usage', *_via_parent('promotion_usage', 'promotion_id', 'promotion', 'business')),

    # 2. Store-scoped transactions, line items before their headers
    ('sale_items', *_via_parent('sale_item', 'sale_id', 'sale', 'store')),
    ('sales', *_by_store('sale')),
    ('supply_return_items', *_via_parent('supply_return_item', 'supply_return_id', 'supply_return', 'store')),
    ('supply_returns', *_by_store('supply_return')),
    ('supply_order_items', *_via_parent('supply_order_item', 'supply_order_id', 'supply_order', 'store')),
    ('supply_payments', *_via_parent('supply_payment', 'supply_order_id', 'supply_order', 'store')),
    ('supply_orders', *_by_store('supply_order')),
    ('restock_items', *_via_parent('restock_item', 'restock_order_id', 'restock_order', 'store')),
    ('restock_orders', *_by_store('restock_order')),

    # 3. Remaining store-level entities
    ('public_orders', *_by_business('public_order')),
    ('saved_carts', *_by_store('saved_cart')),
    ('customers', *_by_store('customer')),
    ('store_settings', *_by_store('store_setting')),

    # 4. Catalog and configuration (products before what they reference)
    ('coupons', *_by_business('coupon')),
    ('promotions', *_by_business('promotion')),
    ('products', *_by_business('product')),
    ('categories', *_by_business('category')),
    ('brands', *_by_business('brand')),
    ('suppliers', *_by_business('supplier')),
    ('notifications', *_by_business('notification')),

    # 5. Access-control joins (demo business AND superadmin exclusions)
    ('user_roles', delete_role_assignments, {'table': 'user_role'}),
    ('user_business_roles', delete_role_assignments, {'table': 'user_business_role'}),

    # 6. Role definitions
    ('roles', delete_roles, {}),

    # 7. Stores
    ('stores', delete_stores, {}),

    # 8. Business-level settings and logs
    ('business_settings', *_by_business('business_setting')),
    ('activity_logs', *_by_business('activity_log')),

    # 9. Accounts
    ('users', delete_users, {}),

    # 10. Businesses - LAST
    ('businesses', delete_businesses, {}),
)


def run_cleanup_steps(store: PurgeStore, protected: ProtectedSets, steps=CLEANUP_STEPS) -> Dict[str, dict]:
    """
    Run every step sequentially, recording each result under its name.

    A failed step is recorded and the next one runs regardless.
    """
    results = {}
    for name, handler, options in steps:
        result = handler(store, protected, **options)
        results[name] = result

        if result.get('error'):
            logger.error(f"Cleanup step '{name}' failed: {result['error']}")
        else:
            logger.info(f"Cleanup step '{name}': deleted {result['deleted']}")

    return results


def run_database_cleanup(session, config) -> dict:
    """
    Delete all non-demo data, keeping superadmin accounts.

    Steps:
    1. Resolve protected sets (fatal on failure, nothing deleted yet)
    2. Run the ordered cleanup steps
    3. Aggregate the per-step results into the report

    Args:
        session: SQLAlchemy session
        config: Mapping with the cleanup settings (e.g. app.config)

    Returns:
        dict report: success, message, results, summary

    Raises:
        ProtectedSetResolutionError: If protected accounts cannot be resolved
    """
    protected = resolve_protected_sets(session, config)

    store = PurgeStore(session, batch_size=config.get('CLEANUP_BATCH_SIZE', DEFAULT_BATCH_SIZE))
    step_results = run_cleanup_steps(store, protected)

    report = build_cleanup_report(step_results)
    logger.info(report['message'])
    return report
