import pytest
from datetime import date, timedelta
from decimal import Decimal
import os
import tempfile

# Test configuration must be in the environment before config.Config is imported
_db_dir = tempfile.mkdtemp(prefix='storefront-tests-')
os.environ['DATABASE_URL'] = f"sqlite:///{os.path.join(_db_dir, 'storefront.db')}"
os.environ['CACHE_ENABLED'] = 'false'
os.environ['FLASK_DEBUG'] = '0'
os.environ['FLASK_ENV'] = 'testing'
os.environ.pop('SENTRY_DSN', None)

from storefront import create_app
from storefront.database import create_tables, get_session
from storefront.models import Offering, Order
from storefront.services import cart_service
from storefront.services.view_state_service import new_shop_state


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.Config')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    with app.app_context():
        create_tables()
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session inside an application context."""
    with app.app_context():
        session = get_session()
        yield session
        session.rollback()


@pytest.fixture(autouse=True)
def clean_tables(app):
    """Every test starts with empty tables."""
    yield
    with app.app_context():
        db = get_session()
        db.rollback()
        db.query(Order).delete()
        db.query(Offering).delete()
        db.commit()


@pytest.fixture
def plain_offering():
    """Offering A: no duration variants."""
    return {
        'id': 'offering-a',
        'name': 'Offering A',
        'category': 'Digital Marketing',
        'icon': '📢',
        'original_price': Decimal('1000'),
        'discount_price': Decimal('800'),
        'description': '',
        'search_tags': ['alpha'],
        'durations': None,
    }


@pytest.fixture
def duration_offering():
    """Offering B: priced per duration."""
    return {
        'id': 'offering-b',
        'name': 'Offering B',
        'category': 'Premium Subscriptions',
        'icon': '🎬',
        'original_price': Decimal('800'),
        'discount_price': Decimal('700'),
        'description': '',
        'search_tags': ['beta', 'stream'],
        'durations': {
            '1m': Decimal('700'),
            '3m': Decimal('2100'),
            '6m': Decimal('4000'),
            '12m': Decimal('7500'),
        },
    }


@pytest.fixture
def website_offering():
    return {
        'id': 'site-basic',
        'name': 'Basic Website',
        'category': 'Website Design',
        'icon': '🌐',
        'original_price': Decimal('20000'),
        'discount_price': Decimal('15000'),
        'description': '',
        'search_tags': ['website'],
        'durations': None,
    }


@pytest.fixture
def scenario_cart(plain_offering, duration_offering):
    """A x1 at 800, B '3m' x2 at 2100: subtotal 5000."""
    cart = cart_service.new_cart()
    cart_service.add_to_cart(cart, plain_offering)
    cart_service.add_to_cart(cart, duration_offering, '3m')
    cart_service.add_to_cart(cart, duration_offering, '3m')
    return cart


@pytest.fixture
def shop():
    return new_shop_state()


@pytest.fixture
def buyer_details():
    """A complete checkout form."""
    return {
        'full_name': 'Rahim Uddin',
        'mobile': '01711000000',
        'email': 'rahim@example.com',
        'whatsapp': '',
        'whatsapp_same': True,
        'business_name': 'Rahim Traders',
        'business_type': 'Retail',
        'business_link': 'https://facebook.com/rahimtraders',
        'district': 'Dhaka',
        'upazila': 'Dhanmondi',
        'address': 'House 12, Road 5',
        'start_date': (date.today() + timedelta(days=7)).isoformat(),
        'instructions': 'Call after 5pm',
        'source': 'Facebook',
    }
