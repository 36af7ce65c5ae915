"""
Integration tests for the database cleanup engine against a real schema
(SQLite with foreign keys enforced).
"""

import pytest
from conftest import row_exists, create_user, seed_business
from scims.database import generate_id
from scims.models import (
    Business, Store, AppUser, Role, UserRole, UserBusinessRole, ActivityLog, Notification,
    Coupon, CouponUsage, PromotionUsage, Product, Sale, SaleItem,
    SupplyOrder, SupplyOrderItem, SupplyPayment, SupplyReturnItem, RestockItem,
    AdminAuditLog
)
from scims.services.cleanup_service import run_database_cleanup, CLEANUP_STEPS
from scims.services.purge_store import PurgeStore


# Rows seed_business creates for one business, per cleanup step
EXPECTED_PER_BUSINESS = {
    'coupon_usage': 2, 'promotion_usage': 1,
    'sale_items': 2, 'sales': 1,
    'supply_return_items': 1, 'supply_returns': 1,
    'supply_order_items': 2, 'supply_payments': 1, 'supply_orders': 1,
    'restock_items': 2, 'restock_orders': 1,
    'public_orders': 1, 'saved_carts': 1, 'customers': 1, 'store_settings': 1,
    'coupons': 1, 'promotions': 1, 'products': 1, 'categories': 1,
    'brands': 1, 'suppliers': 1, 'notifications': 1,
    'user_roles': 1, 'user_business_roles': 1, 'roles': 1, 'stores': 1,
    'business_settings': 1, 'activity_logs': 1, 'users': 1, 'businesses': 1,
}


def add_superadmin_assignment(session, platform):
    """Assign the superadmin a role inside the regular business."""
    regular = platform['regular']
    assignment_id = generate_id()
    session.add(UserRole(
        id=assignment_id,
        user_id=platform['superadmin_id'],
        role_id=regular['role'],
        business_id=regular['business']
    ))
    session.commit()
    return assignment_id


def add_demo_references(session, platform):
    """Demo business log and notification rows pointing at a non-demo cashier."""
    cashier_id = create_user(session, role='cashier')
    demo_business_id = platform['demo']['business']
    session.add(ActivityLog(id=generate_id(), business_id=demo_business_id, user_id=cashier_id, action='SALE'))
    session.add(Notification(
        id=generate_id(), business_id=demo_business_id, user_id=cashier_id, message='Shift closed'
    ))
    session.commit()
    return cashier_id


class TestProtection:
    """Demo data and superadmins survive, everything else goes."""

    def test_demo_rows_and_superadmin_survive(self, app, session, platform):
        run_database_cleanup(session, app.config)

        demo = platform['demo']
        assert row_exists(session, Business, demo['business'])
        assert row_exists(session, Store, demo['store'])
        assert row_exists(session, Product, demo['product'])
        assert row_exists(session, Sale, demo['sale'])
        assert row_exists(session, UserRole, demo['user_role'])
        assert row_exists(session, UserBusinessRole, demo['user_business_role'])
        assert all(row_exists(session, SaleItem, item_id) for item_id in demo['sale_item'])
        assert all(row_exists(session, CouponUsage, usage_id) for usage_id in demo['coupon_usage'])
        assert row_exists(session, AppUser, platform['superadmin_id'])
        assert row_exists(session, AppUser, platform['demo_user_id'])

    def test_non_demo_rows_are_deleted(self, app, session, platform):
        run_database_cleanup(session, app.config)

        regular = platform['regular']
        assert not row_exists(session, Business, regular['business'])
        assert not row_exists(session, Store, regular['store'])
        assert not row_exists(session, Product, regular['product'])
        assert not row_exists(session, Coupon, regular['coupon'])
        assert not row_exists(session, AppUser, platform['regular_user_id'])
        assert session.query(Business).count() == 1
        assert session.query(Store).count() == 1

    def test_report_counts_match_seeded_rows(self, app, session, platform):
        report = run_database_cleanup(session, app.config)

        assert report['success'] is True
        assert report['summary']['hasErrors'] is False
        assert report['summary']['tablesProcessed'] == len(CLEANUP_STEPS)
        assert report['results'] == {step: {'deleted': n} for step, n in EXPECTED_PER_BUSINESS.items()}
        assert report['summary']['totalRecordsDeleted'] == sum(EXPECTED_PER_BUSINESS.values())
        assert list(report['results']) == [name for name, _, _ in CLEANUP_STEPS]

    def test_business_named_like_demo_is_kept(self, app, session, platform):
        owner_id = create_user(session, is_demo=True)
        named_demo = seed_business(session, 'Bakery DEMO', member_id=owner_id)

        run_database_cleanup(session, app.config)

        assert row_exists(session, Business, named_demo['business'])
        assert row_exists(session, Store, named_demo['store'])
        assert row_exists(session, SupplyOrder, named_demo['supply_order'])

    def test_superadmin_assignment_keeps_its_role_and_business(self, app, session, platform):
        regular = platform['regular']
        assignment_id = add_superadmin_assignment(session, platform)

        report = run_database_cleanup(session, app.config)

        assert report['summary']['hasErrors'] is False
        assert row_exists(session, AppUser, platform['superadmin_id'])
        assert row_exists(session, UserRole, assignment_id)
        assert report['results']['roles'] == {'deleted': 0}
        assert report['results']['businesses'] == {'deleted': 0}
        assert row_exists(session, Role, regular['role'])
        assert row_exists(session, Business, regular['business'])
        # The rest of that business is still removed
        assert not row_exists(session, Store, regular['store'])
        assert not row_exists(session, Product, regular['product'])
        assert not row_exists(session, AppUser, platform['regular_user_id'])

    def test_demo_assignment_keeps_a_role_of_another_business(self, app, session, platform):
        regular = platform['regular']
        session.add(UserBusinessRole(
            id=generate_id(),
            user_id=platform['demo_user_id'],
            business_id=platform['demo']['business'],
            role_id=regular['role']
        ))
        session.commit()

        report = run_database_cleanup(session, app.config)

        assert report['summary']['hasErrors'] is False
        assert row_exists(session, Role, regular['role'])
        assert row_exists(session, Business, regular['business'])

    def test_account_referenced_by_demo_logs_is_kept(self, app, session, platform):
        cashier_id = add_demo_references(session, platform)

        report = run_database_cleanup(session, app.config)

        assert report['summary']['hasErrors'] is False
        assert report['results']['users'] == {'deleted': 1}
        assert row_exists(session, AppUser, cashier_id)
        assert not row_exists(session, AppUser, platform['regular_user_id'])

    def test_member_of_demo_business_is_kept_without_demo_flag(self, app, session, platform):
        member_id = create_user(session, role='cashier', is_demo=False)
        session.add(UserRole(
            id=generate_id(),
            user_id=member_id,
            role_id=platform['demo']['role'],
            business_id=platform['demo']['business']
        ))
        session.commit()

        report = run_database_cleanup(session, app.config)

        assert row_exists(session, AppUser, member_id)
        assert report['results']['users'] == {'deleted': 1}


class TestIdempotence:

    def test_second_run_deletes_nothing(self, app, session, platform):
        first = run_database_cleanup(session, app.config)
        second = run_database_cleanup(session, app.config)

        assert first['summary']['totalRecordsDeleted'] > 0
        assert second['summary']['totalRecordsDeleted'] == 0
        assert second['summary']['hasErrors'] is False
        assert second['success'] is True

    def test_second_run_is_clean_with_superadmin_assignment(self, app, session, platform):
        add_superadmin_assignment(session, platform)

        first = run_database_cleanup(session, app.config)
        second = run_database_cleanup(session, app.config)

        assert first['summary']['hasErrors'] is False
        assert second['summary']['totalRecordsDeleted'] == 0
        assert second['summary']['hasErrors'] is False

    def test_second_run_is_clean_with_demo_references(self, app, session, platform):
        add_demo_references(session, platform)

        first = run_database_cleanup(session, app.config)
        second = run_database_cleanup(session, app.config)

        assert first['summary']['hasErrors'] is False
        assert second['summary']['totalRecordsDeleted'] == 0
        assert second['summary']['hasErrors'] is False

    def test_empty_database_is_a_clean_run(self, app, session):
        report = run_database_cleanup(session, app.config)

        assert report['success'] is True
        assert report['summary']['totalRecordsDeleted'] == 0


class TestPartialFailure:

    @pytest.fixture
    def failing_user_delete(self, monkeypatch):
        original = PurgeStore.delete_ids

        def delete_ids(store, table_name, ids, column='id'):
            if table_name == 'app_user':
                raise RuntimeError('store unavailable')
            return original(store, table_name, ids, column)

        monkeypatch.setattr(PurgeStore, 'delete_ids', delete_ids)

    def test_failing_step_is_isolated(self, app, session, platform, failing_user_delete):
        report = run_database_cleanup(session, app.config)

        assert report['success'] is False
        assert report['summary']['hasErrors'] is True
        assert report['results']['users'] == {'deleted': 0, 'error': 'store unavailable'}
        assert 'with some errors' in report['message']

        for step, expected in EXPECTED_PER_BUSINESS.items():
            if step != 'users':
                assert report['results'][step] == {'deleted': expected}, step

        assert row_exists(session, AppUser, platform['regular_user_id'])

    def test_rerun_after_failure_finishes_the_job(self, app, session, platform, failing_user_delete, monkeypatch):
        run_database_cleanup(session, app.config)
        monkeypatch.undo()

        report = run_database_cleanup(session, app.config)

        assert report['success'] is True
        assert report['results']['users'] == {'deleted': 1}
        assert report['summary']['totalRecordsDeleted'] == 1
        assert not row_exists(session, AppUser, platform['regular_user_id'])

    def test_fetch_failure_is_recorded_as_step_error(self, app, session, platform, monkeypatch):
        original = PurgeStore.fetch

        def fetch(store, table_name, columns, where_in=None):
            if table_name == 'notification':
                raise RuntimeError('relation "notification" does not exist')
            return original(store, table_name, columns, where_in)

        monkeypatch.setattr(PurgeStore, 'fetch', fetch)

        report = run_database_cleanup(session, app.config)

        assert report['results']['notifications']['deleted'] == 0
        assert 'does not exist' in report['results']['notifications']['error']
        assert report['results']['products'] == {'deleted': 1}


class TestTwoHop:

    def test_only_non_demo_coupon_usage_is_deleted(self, app, session, platform):
        report = run_database_cleanup(session, app.config)

        demo, regular = platform['demo'], platform['regular']
        assert report['results']['coupon_usage'] == {'deleted': 2}
        assert report['results']['promotion_usage'] == {'deleted': 1}
        assert all(row_exists(session, CouponUsage, usage_id) for usage_id in demo['coupon_usage'])
        assert all(row_exists(session, PromotionUsage, usage_id) for usage_id in demo['promotion_usage'])
        assert not any(row_exists(session, CouponUsage, usage_id) for usage_id in regular['coupon_usage'])


class TestOrdering:

    def test_no_orphaned_supply_rows_remain(self, app, session, platform):
        run_database_cleanup(session, app.config)

        regular = platform['regular']
        assert not row_exists(session, SupplyOrder, regular['supply_order'])
        assert not any(row_exists(session, SupplyOrderItem, item_id) for item_id in regular['supply_order_item'])
        assert not row_exists(session, SupplyPayment, regular['supply_payment'])
        assert not row_exists(session, SupplyReturnItem, regular['supply_return_item'])
        assert not any(row_exists(session, RestockItem, item_id) for item_id in regular['restock_item'])

        store_ids = {store_id for (store_id,) in session.query(Store.id).all()}
        orders = session.query(SupplyOrder).all()
        assert orders and all(order.store_id in store_ids for order in orders)
        order_ids = {order.id for order in orders}
        assert all(item.supply_order_id in order_ids for item in session.query(SupplyOrderItem).all())


class TestAudit:

    def test_audit_log_is_outside_the_cleanup(self, app, session, platform):
        from scims.services import audit_service

        report = run_database_cleanup(session, app.config)
        audit_service.log_cleanup(session, platform['superadmin_id'], report)
        second = run_database_cleanup(session, app.config)

        assert second['summary']['totalRecordsDeleted'] == 0
        entry = session.query(AdminAuditLog).one()
        assert entry.action == 'DATABASE_CLEANUP'
        assert entry.details['totalRecordsDeleted'] == report['summary']['totalRecordsDeleted']
        assert entry.details['failedSteps'] == []
