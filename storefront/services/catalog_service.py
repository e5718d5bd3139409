"""
Catalog store - read-through access to the ``services`` table.

Reads are cached in Redis (module ``catalog``). Price edits patch the cached
copy in place; inserts and seeding invalidate it and re-fetch from the store.
When the store cannot be read the bundled seed catalog is served instead.
"""

import copy
import logging
import time
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.schema import CreateTable

from storefront.data import SERVICES
from storefront.exceptions import (
    NotFoundError, PersistenceError, SchemaMissingError, StoreUnavailableError, ValidationError,
)
from storefront.models import Offering, OfferingCategory, Order
from storefront.services.cache_service import get_cache

logger = logging.getLogger(__name__)

CACHE_MODULE = 'catalog'
CACHE_KEY = 'all'

ALL_CATEGORIES = 'all'

NOTICE_SETUP_REQUIRED = 'setup_required'
NOTICE_FETCH_ERROR = 'fetch_error'

# SQLite and psycopg2 wording for a missing table. Connection failures such as
# 'database "x" does not exist' or a missing role are not schema problems.
_SCHEMA_MISSING_MARKERS = ('no such table', 'undefinedtable')


def _is_schema_missing(error: Exception) -> bool:
    text = str(error).lower()
    if any(marker in text for marker in _SCHEMA_MISSING_MARKERS):
        return True
    return 'relation' in text and 'does not exist' in text


def _json_number(value: Any) -> Any:
    """Prices inside JSON columns are stored as plain numbers."""
    value = Decimal(str(value))
    return int(value) if value == value.to_integral_value() else float(value)


def _invalidate_cache() -> None:
    try:
        get_cache().invalidate_module(CACHE_MODULE)
    except RuntimeError:
        pass  # Cache not initialized (CLI / tests)


def seed_offerings() -> List[Dict[str, Any]]:
    """Fresh copies of the bundled catalog."""
    return copy.deepcopy(SERVICES)


def fetch_all(session: Session) -> List[Dict[str, Any]]:
    """
    Read every offering from the store, ordered by category.

    Raises:
        SchemaMissingError: the ``services`` table has not been created
        StoreUnavailableError: any other database failure
    """
    try:
        rows = session.query(Offering).order_by(Offering.category, Offering.name).all()
        return [row.to_dict() for row in rows]
    except SQLAlchemyError as e:
        session.rollback()
        if _is_schema_missing(e):
            logger.error(f"[CATALOG] Schema missing: {e}")
            raise SchemaMissingError()
        logger.error(f"[CATALOG] Fetch failed: {e}")
        raise StoreUnavailableError()


def list_offerings(session: Session) -> List[Dict[str, Any]]:
    """Cached read-through of fetch_all. Empty results are not cached."""
    try:
        cache = get_cache()
    except RuntimeError:
        return fetch_all(session)

    cached = cache.get(CACHE_MODULE, CACHE_KEY)
    if cached is not None:
        logger.debug("[CACHE] Catalog HIT")
        return cached

    offerings = fetch_all(session)
    if offerings:
        cache.set(CACHE_MODULE, CACHE_KEY, offerings)
    return offerings


def load_catalog(session: Session) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, str]]]:
    """
    Catalog for the storefront, never failing.

    Returns (offerings, notice). Falls back to the seed catalog when the store
    is empty or unreadable; the notice tells the operator whether the store
    needs provisioning (setup_required) or just failed to answer (fetch_error).
    """
    try:
        offerings = list_offerings(session)
    except SchemaMissingError as e:
        return seed_offerings(), {'kind': NOTICE_SETUP_REQUIRED, 'message': e.message}
    except StoreUnavailableError as e:
        return seed_offerings(), {'kind': NOTICE_FETCH_ERROR, 'message': e.message}

    if not offerings:
        logger.info("[CATALOG] Store is empty, serving bundled catalog")
        return seed_offerings(), None
    return offerings, None


def find_offering(offerings: Iterable[Dict[str, Any]], offering_id: str) -> Dict[str, Any]:
    offering = next((o for o in offerings if o['id'] == offering_id), None)
    if not offering:
        raise NotFoundError('Service not found.')
    return offering


def search_offerings(
    offerings: Iterable[Dict[str, Any]],
    query: str = '',
    category: str = ''
) -> List[Dict[str, Any]]:
    """Case-insensitive match on name, category or any search tag, within a category."""
    query = (query or '').strip().lower()
    category = (category or '').strip()

    results = []
    for offering in offerings:
        if category and category != ALL_CATEGORIES and offering['category'] != category:
            continue
        if query:
            haystack = [offering['name'], offering['category']] + list(offering.get('search_tags') or [])
            if not any(query in str(text).lower() for text in haystack):
                continue
        results.append(offering)
    return results


def _to_row(data: Dict[str, Any]) -> Offering:
    durations = data.get('durations')
    return Offering(
        id=data['id'],
        name=data['name'],
        category=data['category'],
        icon=data.get('icon') or '✨',
        original_price=Decimal(str(data['original_price'])),
        discount_price=Decimal(str(data['discount_price'])),
        description=data.get('description') or '',
        search_tags=list(data.get('search_tags') or []),
        durations={k: _json_number(v) for k, v in durations.items()} if durations else None,
    )


def upsert(session: Session, offerings: Iterable[Dict[str, Any]]) -> int:
    """Insert or replace offerings by id. Idempotent."""
    count = 0
    try:
        for data in offerings:
            session.merge(_to_row(data))
            count += 1
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[CATALOG] Upsert failed: {e}")
        if _is_schema_missing(e):
            raise PersistenceError('Could not update the database. Have the tables been created?')
        raise PersistenceError('Could not update the database.')
    finally:
        _invalidate_cache()

    logger.info(f"[CATALOG] Upserted {count} offerings")
    return count


def seed_catalog(session: Session) -> List[Dict[str, Any]]:
    """Sync the bundled catalog into the store and re-fetch."""
    upsert(session, SERVICES)
    return list_offerings(session)


def _patch_cached_price(offering_id: str, original_price: Decimal, discount_price: Decimal) -> None:
    try:
        cache = get_cache()
    except RuntimeError:
        return
    cached = cache.get(CACHE_MODULE, CACHE_KEY)
    if not cached:
        return
    for offering in cached:
        if offering['id'] == offering_id:
            offering['original_price'] = original_price
            offering['discount_price'] = discount_price
    cache.set(CACHE_MODULE, CACHE_KEY, cached)


def update_price(session: Session, offering_id: str, original_price: Decimal, discount_price: Decimal) -> Dict[str, Any]:
    """
    Write both prices of an offering.

    On success the cached catalog copy is patched in place (no re-fetch). On
    failure nothing cached changes.
    """
    try:
        offering = session.query(Offering).filter(Offering.id == offering_id).first()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[CATALOG] Price update lookup failed for {offering_id}: {e}")
        raise PersistenceError('Could not update the price.')
    if not offering:
        raise NotFoundError('Service not found.')

    try:
        offering.original_price = original_price
        offering.discount_price = discount_price
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[CATALOG] Price update failed for {offering_id}: {e}")
        raise PersistenceError('Could not update the price.')

    _patch_cached_price(offering_id, original_price, discount_price)
    logger.info(f"[CATALOG] Price updated {offering_id}: {original_price} -> {discount_price}")
    return offering.to_dict()


def generate_offering_id() -> str:
    return f"custom-{int(time.time() * 1000)}"


def validate_draft(draft: Dict[str, Any]) -> None:
    """Name, category and both prices are required before anything is written."""
    missing = [
        field for field in ('name', 'category', 'original_price', 'discount_price')
        if draft.get(field) is None or str(draft.get(field)).strip() == ''
    ]
    if missing:
        raise ValidationError('Please fill in all fields: ' + ', '.join(missing),
                              payload={'fields': missing})
    if draft['category'] not in OfferingCategory.values():
        raise ValidationError(f'Unknown category "{draft["category"]}".')


def create_offering(session: Session, draft: Dict[str, Any]) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Insert a new offering with a generated id, then re-fetch the whole catalog.

    Returns (created offering, refreshed catalog).
    """
    validate_draft(draft)
    data = dict(draft, id=generate_offering_id(), durations=None)

    try:
        session.add(_to_row(data))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[CATALOG] Insert failed: {e}")
        raise PersistenceError('Could not add the service.')

    _invalidate_cache()
    logger.info(f"[CATALOG] Created offering {data['id']}")
    offerings = list_offerings(session)
    return find_offering(offerings, data['id']), offerings


def setup_sql() -> str:
    """PostgreSQL DDL for the tables this application needs."""
    dialect = postgresql.dialect()
    statements = [
        str(CreateTable(model.__table__, if_not_exists=True).compile(dialect=dialect)).strip() + ';'
        for model in (Offering, Order)
    ]
    return '\n\n'.join(statements)
