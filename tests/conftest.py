import pytest

from scims import create_app
from scims.database import Base, generate_id, get_engine, get_session
from scims.models import (
    Business, Store, AppUser, Role, UserRole, UserBusinessRole,
    Category, Brand, Supplier, Product,
    Coupon, CouponUsage, Promotion, PromotionUsage,
    Customer, Sale, SaleItem, SavedCart, PublicOrder,
    SupplyOrder, SupplyOrderItem, SupplyPayment, SupplyReturn, SupplyReturnItem,
    RestockOrder, RestockItem,
    BusinessSetting, StoreSetting, ActivityLog, Notification
)


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestingConfig')
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Fresh schema and database session for each test."""
    engine = get_engine()
    Base.metadata.create_all(engine)
    session = get_session()
    yield session
    session.rollback()
    session.remove()
    Base.metadata.drop_all(engine)


def row_exists(session, model, row_id):
    """True if the row is still in the database."""
    return session.query(model).filter_by(id=row_id).count() == 1


def create_user(session, role='business_admin', is_demo=False, email=None):
    """Create an account and return its id."""
    user_id = generate_id()
    session.add(AppUser(
        id=user_id,
        email=email or f'{user_id[:8]}@test.com',
        name=f'User {user_id[:8]}',
        role=role,
        is_demo=is_demo,
        is_active=True
    ))
    session.commit()
    return user_id


def seed_business(session, name, business_id=None, member_id=None):
    """
    Create a business with one store and one row in every dependent table.

    Returns:
        dict of the created ids keyed by table name (plus usage lists)
    """
    ids = {'business': business_id or generate_id()}
    for key in ('store', 'role', 'user_role', 'user_business_role', 'category', 'brand',
                'supplier', 'product', 'coupon', 'promotion', 'customer', 'sale',
                'saved_cart', 'public_order', 'supply_order', 'supply_payment',
                'supply_return', 'supply_return_item', 'restock_order',
                'business_setting', 'store_setting', 'activity_log', 'notification'):
        ids[key] = generate_id()
    ids['coupon_usage'] = [generate_id(), generate_id()]
    ids['promotion_usage'] = [generate_id()]
    ids['sale_item'] = [generate_id(), generate_id()]
    ids['supply_order_item'] = [generate_id(), generate_id()]
    ids['restock_item'] = [generate_id(), generate_id()]

    business_id = ids['business']
    store_id = ids['store']

    session.add(Business(id=business_id, name=name, email='owner@test.com', is_active=True))
    session.flush()
    session.add(Store(id=store_id, business_id=business_id, name=f'{name} Store'))
    session.add(Role(id=ids['role'], business_id=business_id, name='Manager'))
    session.add_all([
        Category(id=ids['category'], business_id=business_id, name='Drinks'),
        Brand(id=ids['brand'], business_id=business_id, name='Generic'),
        Supplier(id=ids['supplier'], business_id=business_id, name='Wholesale Co'),
        Coupon(id=ids['coupon'], business_id=business_id, code='SAVE10', discount_value=10),
        Promotion(id=ids['promotion'], business_id=business_id, name='2x1'),
        PublicOrder(id=ids['public_order'], business_id=business_id, customer_name='Web', total=20),
        BusinessSetting(id=ids['business_setting'], business_id=business_id, key='currency', value='USD'),
    ])
    session.flush()

    session.add(Product(
        id=ids['product'], business_id=business_id, name='Cola', sku='COLA-1', price=2,
        category_id=ids['category'], brand_id=ids['brand'], supplier_id=ids['supplier']
    ))
    session.add(Customer(id=ids['customer'], store_id=store_id, name='Jane'))
    session.add(StoreSetting(id=ids['store_setting'], store_id=store_id, key='receipt', value='short'))
    session.add_all([CouponUsage(id=usage_id, coupon_id=ids['coupon']) for usage_id in ids['coupon_usage']])
    session.add_all([PromotionUsage(id=usage_id, promotion_id=ids['promotion']) for usage_id in ids['promotion_usage']])
    session.flush()

    session.add(Sale(id=ids['sale'], store_id=store_id, customer_id=ids['customer'], total=4))
    session.add(SavedCart(id=ids['saved_cart'], store_id=store_id, customer_id=ids['customer'], items='[]'))
    session.add(SupplyOrder(id=ids['supply_order'], store_id=store_id, supplier_id=ids['supplier'], total_amount=50))
    session.add(RestockOrder(id=ids['restock_order'], store_id=store_id))
    session.flush()

    session.add_all([
        SaleItem(id=item_id, sale_id=ids['sale'], product_id=ids['product'], quantity=1, unit_price=2)
        for item_id in ids['sale_item']
    ])
    session.add_all([
        SupplyOrderItem(id=item_id, supply_order_id=ids['supply_order'], product_id=ids['product'], quantity=10)
        for item_id in ids['supply_order_item']
    ])
    session.add(SupplyPayment(id=ids['supply_payment'], supply_order_id=ids['supply_order'], amount=50))
    session.add(SupplyReturn(
        id=ids['supply_return'], store_id=store_id, supply_order_id=ids['supply_order'], reason='Damaged'
    ))
    session.add_all([
        RestockItem(id=item_id, restock_order_id=ids['restock_order'], product_id=ids['product'], quantity=5)
        for item_id in ids['restock_item']
    ])
    session.flush()
    session.add(SupplyReturnItem(
        id=ids['supply_return_item'], supply_return_id=ids['supply_return'], product_id=ids['product']
    ))

    session.add(UserRole(id=ids['user_role'], user_id=member_id, role_id=ids['role'], business_id=business_id))
    session.add(UserBusinessRole(
        id=ids['user_business_role'], user_id=member_id, business_id=business_id, role_id=ids['role']
    ))
    session.add(ActivityLog(id=ids['activity_log'], business_id=business_id, user_id=member_id, action='LOGIN'))
    session.add(Notification(
        id=ids['notification'], business_id=business_id, user_id=member_id, message='Low stock'
    ))
    session.commit()
    return ids


@pytest.fixture(scope='function')
def platform(app, session):
    """
    A demo business (well-known ID), a regular business, a superadmin, a
    demo account and a regular account.
    """
    superadmin_id = create_user(session, role='superadmin', email='root@test.com')
    demo_user_id = create_user(session, role='business_admin', is_demo=True)
    regular_user_id = create_user(session, role='business_admin')

    demo = seed_business(
        session, 'Demo Business',
        business_id=app.config['DEMO_BUSINESS_ID'],
        member_id=demo_user_id
    )
    regular = seed_business(session, 'Acme Retail', member_id=regular_user_id)

    return {
        'demo': demo,
        'regular': regular,
        'superadmin_id': superadmin_id,
        'demo_user_id': demo_user_id,
        'regular_user_id': regular_user_id,
    }


@pytest.fixture(scope='function')
def superadmin_client(client, platform):
    """Test client logged in as the superadmin."""
    with client.session_transaction() as sess:
        sess['user_id'] = platform['superadmin_id']
    return client
