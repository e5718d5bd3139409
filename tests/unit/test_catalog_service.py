"""
Unit tests for the catalog store.
"""

import copy

import pytest
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from storefront.data import SERVICES
from storefront.exceptions import NotFoundError, SchemaMissingError, ValidationError
from storefront.models import Offering
from storefront.services import catalog_service
from storefront.services.cache_service import CacheService


@pytest.fixture
def unprovisioned_session():
    """Session on a database without any tables."""
    engine = create_engine('sqlite://')
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


class TestSearch:
    """Tests for search_offerings."""

    def test_match_on_name_case_insensitive(self):
        results = catalog_service.search_offerings(SERVICES, 'NETFLIX')
        assert [o['id'] for o in results] == ['netflix-premium']

    def test_match_on_search_tag(self):
        results = catalog_service.search_offerings(SERVICES, 'wordpress')
        assert {'business-website', 'wp-theme'} <= {o['id'] for o in results}

    def test_category_filter(self):
        results = catalog_service.search_offerings(SERVICES, category='Website Design')
        assert {o['id'] for o in results} == {'business-website', 'ecommerce-website'}

    def test_all_category_matches_everything(self):
        assert len(catalog_service.search_offerings(SERVICES, '', 'all')) == len(SERVICES)

    def test_no_match(self):
        assert catalog_service.search_offerings(SERVICES, 'zzzz') == []


class TestReads:
    """Tests for fetch and fallback."""

    def test_schema_missing_is_detected(self, app, unprovisioned_session):
        with app.app_context():
            with pytest.raises(SchemaMissingError):
                catalog_service.fetch_all(unprovisioned_session)

    def test_schema_missing_falls_back_to_seed(self, app, unprovisioned_session):
        with app.app_context():
            offerings, notice = catalog_service.load_catalog(unprovisioned_session)

        assert notice['kind'] == catalog_service.NOTICE_SETUP_REQUIRED
        assert [o['id'] for o in offerings] == [s['id'] for s in SERVICES]

    def test_empty_store_falls_back_without_notice(self, session):
        offerings, notice = catalog_service.load_catalog(session)
        assert notice is None
        assert len(offerings) == len(SERVICES)

    def test_fallback_returns_copies(self, session):
        offerings, _ = catalog_service.load_catalog(session)
        offerings[0]['name'] = 'Changed'
        assert SERVICES[0]['name'] != 'Changed'

    def test_fetch_orders_by_category(self, session):
        catalog_service.seed_catalog(session)
        categories = [o['category'] for o in catalog_service.fetch_all(session)]
        assert categories == sorted(categories)

    def test_find_offering_unknown(self):
        with pytest.raises(NotFoundError):
            catalog_service.find_offering(SERVICES, 'nope')


class TestWrites:
    """Tests for seed, price updates and new offerings."""

    def test_seed_is_idempotent(self, session):
        catalog_service.seed_catalog(session)
        catalog_service.seed_catalog(session)
        assert session.query(Offering).count() == len(SERVICES)

    def test_seed_keeps_durations(self, session):
        offerings = catalog_service.seed_catalog(session)
        netflix = catalog_service.find_offering(offerings, 'netflix-premium')
        assert netflix['durations']['3m'] == Decimal('1000')
        assert netflix['original_price'] == Decimal('450')

    def test_update_price(self, session):
        catalog_service.seed_catalog(session)
        updated = catalog_service.update_price(session, 'logo-design', Decimal('3500'), Decimal('1800'))

        assert updated['original_price'] == Decimal('3500')
        assert updated['discount_price'] == Decimal('1800')
        row = session.query(Offering).filter_by(id='logo-design').one()
        assert row.discount_price == Decimal('1800')

    def test_update_price_unknown_offering(self, session):
        with pytest.raises(NotFoundError):
            catalog_service.update_price(session, 'missing', Decimal('1'), Decimal('1'))

    def test_create_offering(self, session):
        created, offerings = catalog_service.create_offering(session, {
            'name': 'Landing Page',
            'category': 'Website Design',
            'original_price': Decimal('12000'),
            'discount_price': Decimal('9000'),
            'search_tags': ['landing'],
        })

        assert created['id'].startswith('custom-')
        assert created['durations'] is None
        assert created['icon'] == '✨'
        assert created in offerings
        assert session.query(Offering).count() == 1

    def test_create_offering_requires_fields(self, session):
        with pytest.raises(ValidationError) as exc_info:
            catalog_service.create_offering(session, {'name': 'No prices', 'category': 'Website Design'})

        assert exc_info.value.payload['fields'] == ['original_price', 'discount_price']
        assert session.query(Offering).count() == 0

    def test_create_offering_rejects_unknown_category(self, session):
        with pytest.raises(ValidationError):
            catalog_service.create_offering(session, {
                'name': 'X', 'category': 'Gardening',
                'original_price': Decimal('1'), 'discount_price': Decimal('1'),
            })


def test_setup_sql_covers_both_tables():
    sql = catalog_service.setup_sql()
    assert 'CREATE TABLE IF NOT EXISTS services' in sql
    assert 'CREATE TABLE IF NOT EXISTS orders' in sql


class InMemoryCache(CacheService):
    """CacheService backed by a dict instead of Redis."""

    def __init__(self):
        super().__init__()
        self.store = {}
        self.invalidated = []

    def is_available(self):
        return True

    def get(self, module, key):
        value = self.store.get(self._build_key(module, key))
        return copy.deepcopy(value)

    def set(self, module, key, value, ttl=None):
        self.store[self._build_key(module, key)] = copy.deepcopy(value)
        return True

    def invalidate_module(self, module):
        prefix = self._build_key(module, '')
        keys = [k for k in self.store if k.startswith(prefix)]
        for k in keys:
            del self.store[k]
        self.invalidated.append(module)
        return len(keys)


class _BrokenConnection:
    """Session whose database cannot be reached at all."""

    def __init__(self, message):
        self.message = message
        self.rolled_back = False

    def query(self, *args):
        raise OperationalError('SELECT 1', {}, Exception(self.message))

    def rollback(self):
        self.rolled_back = True


class TestSchemaDetection:
    """Tests for telling a missing table apart from other store failures."""

    @pytest.mark.parametrize('message', [
        'no such table: services',
        'relation "services" does not exist',
        '(psycopg2.errors.UndefinedTable) relation "services" does not exist',
    ])
    def test_missing_table(self, message):
        assert catalog_service._is_schema_missing(Exception(message))

    @pytest.mark.parametrize('message', [
        'FATAL:  database "storefront" does not exist',
        'FATAL:  role "shop" does not exist',
        'could not connect to server: Connection refused',
    ])
    def test_connection_problems_are_not_schema_problems(self, message):
        assert not catalog_service._is_schema_missing(Exception(message))

    def test_missing_database_reports_fetch_error(self, app):
        broken = _BrokenConnection('FATAL:  database "storefront" does not exist')
        with app.app_context():
            offerings, notice = catalog_service.load_catalog(broken)

        assert notice['kind'] == catalog_service.NOTICE_FETCH_ERROR
        assert broken.rolled_back
        assert len(offerings) == len(SERVICES)


class TestCacheConsistency:
    """Price edits patch the cached catalog; inserts and seeding re-fetch it."""

    @pytest.fixture
    def cache(self, monkeypatch):
        fake = InMemoryCache()
        monkeypatch.setattr(catalog_service, 'get_cache', lambda: fake)
        return fake

    @pytest.fixture
    def fetches(self, monkeypatch):
        calls = []
        fetch_all = catalog_service.fetch_all

        def counting_fetch(session):
            calls.append(session)
            return fetch_all(session)

        monkeypatch.setattr(catalog_service, 'fetch_all', counting_fetch)
        return calls

    def _cached(self, cache):
        return cache.get(catalog_service.CACHE_MODULE, catalog_service.CACHE_KEY)

    def test_seed_invalidates_and_refetches(self, session, cache, fetches):
        cache.set(catalog_service.CACHE_MODULE, catalog_service.CACHE_KEY, [{'id': 'stale'}])

        offerings = catalog_service.seed_catalog(session)

        assert cache.invalidated == [catalog_service.CACHE_MODULE]
        assert len(fetches) == 1
        assert [o['id'] for o in self._cached(cache)] == [o['id'] for o in offerings]

    def test_price_update_patches_cache_without_refetch(self, session, cache, fetches):
        catalog_service.seed_catalog(session)
        fetched = len(fetches)
        invalidated = len(cache.invalidated)

        catalog_service.update_price(session, 'logo-design', Decimal('10'), Decimal('5'))

        logo = catalog_service.find_offering(self._cached(cache), 'logo-design')
        assert logo['original_price'] == Decimal('10')
        assert logo['discount_price'] == Decimal('5')
        assert len(fetches) == fetched
        assert len(cache.invalidated) == invalidated

        offerings = catalog_service.list_offerings(session)
        assert catalog_service.find_offering(offerings, 'logo-design')['discount_price'] == Decimal('5')
        assert len(fetches) == fetched

    def test_failed_price_update_leaves_cache_alone(self, session, cache):
        catalog_service.seed_catalog(session)
        before = self._cached(cache)

        with pytest.raises(NotFoundError):
            catalog_service.update_price(session, 'missing', Decimal('1'), Decimal('1'))

        assert self._cached(cache) == before

    def test_create_invalidates_and_refetches(self, session, cache, fetches):
        catalog_service.seed_catalog(session)
        fetched = len(fetches)

        created, offerings = catalog_service.create_offering(session, {
            'name': 'Landing Page',
            'category': 'Website Design',
            'original_price': Decimal('12000'),
            'discount_price': Decimal('9000'),
        })

        assert cache.invalidated == [catalog_service.CACHE_MODULE] * 2
        assert len(fetches) == fetched + 1
        cached_ids = [o['id'] for o in self._cached(cache)]
        assert created['id'] in cached_ids
        assert len(cached_ids) == len(SERVICES) + 1
