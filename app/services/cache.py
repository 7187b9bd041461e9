"""
Cache Service Singleton - AI Use-Case Portfolio
app/services/cache.py

Provides a singleton Redis cache instance with TTL constants and the
cache-aside helpers used by the routers. Gracefully handles Redis
unavailability: a cache failure never fails a request.
"""
import logging
import redis
from typing import Callable, Optional, Type, TypeVar
from pydantic import BaseModel
from app.services.redis_cache import RedisCache
from app.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# TTL constants (in seconds)
TTL_USE_CASES = settings.CACHE_TTL_USE_CASES
TTL_METADATA = settings.CACHE_TTL_METADATA

# Key prefixes
CACHE_KEY_USE_CASE_PREFIX = "use_case:"
CACHE_KEY_USE_CASES_PREFIX = "use_cases:"
CACHE_KEY_METADATA = "metadata:default"

# Singleton instance
_cache: Optional[RedisCache] = None


def get_cache() -> Optional[RedisCache]:
    """
    Get or create Redis cache instance.

    Returns:
        RedisCache instance if caching is enabled and Redis is available,
        None otherwise.
    """
    global _cache
    if not settings.CACHE_ENABLED:
        return None
    if _cache is None:
        try:
            _cache = RedisCache()
            _cache.client.ping()  # Test connection
        except (redis.RedisError, ConnectionError) as e:
            logger.warning("Redis unavailable, continuing without cache: %s", e)
            _cache = None
    return _cache


def reset_cache() -> None:
    """
    Reset the cache singleton.

    Useful for testing or when Redis connection needs to be re-established.
    """
    global _cache
    _cache = None


def cached(key: str, model: Type[T], ttl: int, loader: Callable[[], T]) -> T:
    """Cache-aside read: return the cached model or load, store and return it."""
    cache = get_cache()

    # 1. Try cache first
    if cache:
        try:
            hit = cache.get(key, model)
            if hit is not None:
                return hit
        except (redis.RedisError, ValueError) as e:
            logger.warning("Cache read failed for %s: %s", key, e)

    # 2. Cache miss - load from database
    value = loader()

    # 3. Store in cache
    if cache:
        try:
            cache.set(key, value, ttl)
        except redis.RedisError as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    return value


def invalidate_use_case_cache(use_case_id: Optional[str] = None) -> None:
    """Invalidate use case entries (one item plus every list view)."""
    cache = get_cache()
    if cache:
        try:
            if use_case_id:
                cache.delete(f"{CACHE_KEY_USE_CASE_PREFIX}{use_case_id}")
            else:
                cache.delete_pattern(f"{CACHE_KEY_USE_CASE_PREFIX}*")
            cache.delete_pattern(f"{CACHE_KEY_USE_CASES_PREFIX}*")
        except redis.RedisError as e:
            logger.warning("Cache invalidation failed: %s", e)


def invalidate_metadata_cache() -> None:
    cache = get_cache()
    if cache:
        try:
            cache.delete(CACHE_KEY_METADATA)
        except redis.RedisError as e:
            logger.warning("Cache invalidation failed: %s", e)
