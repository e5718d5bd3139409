"""
Redis cache for catalog reads.

Entries live under ``{prefix}:{module}:{key}`` and expire after the catalog
TTL unless a caller passes its own. When Redis is disabled or unreachable
every call is a no-op and readers fall through to the database.
"""

import logging
import json
from typing import Any, Optional, Dict
from datetime import datetime, date
from decimal import Decimal

import redis
from redis.exceptions import RedisError, ConnectionError, TimeoutError
from flask import Flask

logger = logging.getLogger(__name__)

_DECIMAL_TAG = "__decimal__"


def _encode(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return {_DECIMAL_TAG: str(obj)}
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Cannot cache value of type {type(obj).__name__}")


def _decode(dct: Dict[str, Any]) -> Any:
    if _DECIMAL_TAG in dct:
        return Decimal(dct[_DECIMAL_TAG])
    return dct


class CacheService:
    """Cache-aside store for catalog snapshots. Prices keep their Decimal precision."""

    def __init__(self, app: Optional[Flask] = None):
        self.client: Optional[redis.Redis] = None
        self._enabled: bool = False
        self._prefix: str = "storefront"
        self._ttl: int = 300

        if app:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self._enabled = app.config.get('CACHE_ENABLED', True)
        self._prefix = app.config.get('CACHE_KEY_PREFIX', self._prefix)
        self._ttl = app.config.get('CACHE_CATALOG_TTL', self._ttl)

        if not self._enabled:
            logger.info("[CACHE] Catalog cache disabled by config")
            return

        redis_url = app.config.get('REDIS_URL', 'redis://redis:6379/0')
        try:
            self.client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=3,
                socket_timeout=3,
                retry_on_timeout=True,
                health_check_interval=30
            )
            self.client.ping()
            logger.info(f"[CACHE] Redis connected: {redis_url}")
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.warning(f"[CACHE] Redis unreachable ({e}); serving catalog from the database only")
            self._enabled = False
            self.client = None

    def is_available(self) -> bool:
        if not self._enabled or self.client is None:
            return False
        try:
            return bool(self.client.ping())
        except RedisError:
            return False

    def _build_key(self, module: str, key: str) -> str:
        return f"{self._prefix}:{module}:{key}"

    def _serialize(self, value: Any) -> str:
        return json.dumps(value, default=_encode)

    def _deserialize(self, value: str) -> Any:
        return json.loads(value, object_hook=_decode)

    def get(self, module: str, key: str) -> Optional[Any]:
        """Cached value, or None on a miss or any Redis failure."""
        if not self.is_available():
            return None
        try:
            raw = self.client.get(self._build_key(module, key))
        except RedisError as e:
            logger.warning(f"[CACHE] Read failed for {module}:{key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return self._deserialize(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"[CACHE] Corrupt entry {module}:{key}: {e}")
            return None

    def set(self, module: str, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a value for ``ttl`` seconds (catalog TTL by default)."""
        if not self.is_available():
            return False
        try:
            payload = self._serialize(value)
            self.client.setex(self._build_key(module, key), ttl or self._ttl, payload)
        except (RedisError, TypeError) as e:
            logger.warning(f"[CACHE] Write failed for {module}:{key}: {e}")
            return False
        return True

    def invalidate_module(self, module: str) -> int:
        """Drop every entry of a module. Returns how many keys were removed."""
        if not self.is_available():
            return 0
        pattern = self._build_key(module, "*")
        try:
            keys = list(self.client.scan_iter(match=pattern, count=100))
            if keys:
                self.client.delete(*keys)
                logger.info(f"[CACHE] Invalidated {pattern} ({len(keys)} keys)")
            return len(keys)
        except RedisError as e:
            logger.warning(f"[CACHE] Invalidate failed for {pattern}: {e}")
            return 0


_cache_service: Optional[CacheService] = None


def init_cache(app: Flask) -> None:
    global _cache_service
    _cache_service = CacheService(app)
    app.extensions['cache'] = _cache_service


def get_cache() -> CacheService:
    if _cache_service is None:
        raise RuntimeError("Cache not initialized.")
    return _cache_service
