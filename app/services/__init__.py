"""
Services module for the AI Use-Case Portfolio.
"""

from app.services.cache import get_cache
from app.services.redis_cache import RedisCache, get_redis_cache
from app.services.snowflake import get_snowflake_connection


__all__ = [
    "get_cache",
    "get_redis_cache",
    "RedisCache",
    "get_snowflake_connection",
]
