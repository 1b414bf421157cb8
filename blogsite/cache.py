import logging
import time

from django.conf import settings
from django.core.cache import caches
from django.core.cache.backends.base import InvalidCacheBackendError

logger = logging.getLogger(__name__)


class CacheOperationError(Exception):
    pass


def get_cache(key, default=None, version=None, cache_name="default"):
    """Safe cache retrieval with enhanced error handling"""
    try:
        if not isinstance(key, str):
            raise ValueError("Cache key must be string")

        return caches[cache_name].get(key, default=default, version=version)
    except InvalidCacheBackendError as e:
        logger.warning(f"Cache backend '{cache_name}' unavailable: {e}")
        return default
    except Exception as e:
        logger.warning(f"Cache get failed for key {key}: {e}")
        return default


def set_cache(key, value, timeout=None, version=None, cache_name="default"):
    """Cache setter with timeout handling and validation"""
    try:
        if not isinstance(key, str):
            raise ValueError("Cache key must be string")

        caches[cache_name].set(key, value, timeout=timeout, version=version)
        return True
    except Exception as e:
        raise CacheOperationError(f"Cache set failed: {str(e)}")


def delete_cache(key, version=None, cache_name="default"):
    """Idempotent cache deletion with error suppression"""
    try:
        caches[cache_name].delete(key, version=version)
        return True
    except Exception as e:
        logger.warning(f"Cache delete failed for key {key}: {e}")
        return False


class ReadThroughCache:
    """
    Read-through cache keyed by entity id.

    Entries are stored as ``(value, inserted_at)`` pairs and their age is
    checked on every lookup, so an entry older than ``ttl`` is dropped even if
    the backend has not evicted it yet. Writers call ``invalidate`` for the
    keys they touch. When ``BLOG_CACHE_ENABLED`` is off every lookup is a miss
    and nothing is stored.
    """

    _MISS = object()

    def __init__(self, prefix: str, ttl: int = None, cache_name: str = "default"):
        self.prefix = prefix
        self._ttl = ttl
        self.cache_name = cache_name

    @property
    def enabled(self) -> bool:
        return getattr(settings, "BLOG_CACHE_ENABLED", True)

    @property
    def ttl(self) -> int:
        if self._ttl is not None:
            return self._ttl
        return getattr(settings, "BLOG_CACHE_TTL", 60)

    def make_key(self, key) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key, default=None):
        if not self.enabled:
            return default

        cache_key = self.make_key(key)
        entry = get_cache(cache_key, default=self._MISS, cache_name=self.cache_name)
        if entry is self._MISS:
            logger.debug(f"Cache miss for key: {cache_key}")
            return default

        value, inserted_at = entry
        if time.time() - inserted_at > self.ttl:
            logger.debug(f"Cache entry expired for key: {cache_key}")
            delete_cache(cache_key, cache_name=self.cache_name)
            return default

        logger.debug(f"Cache hit for key: {cache_key}")
        return value

    def set(self, key, value) -> bool:
        if not self.enabled:
            return False

        cache_key = self.make_key(key)
        try:
            # Backend timeout is a safety net; freshness is decided in get().
            return set_cache(
                cache_key,
                (value, time.time()),
                timeout=self.ttl * 2,
                cache_name=self.cache_name,
            )
        except CacheOperationError as e:
            logger.warning(f"Failed to cache data for key {cache_key}: {e}")
            return False

    def get_or_load(self, key, loader):
        value = self.get(key, default=self._MISS)
        if value is not self._MISS:
            return value

        value = loader()
        self.set(key, value)
        return value

    def invalidate(self, *keys) -> None:
        for key in keys:
            delete_cache(self.make_key(key), cache_name=self.cache_name)
