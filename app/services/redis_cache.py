import logging
import redis
from typing import Optional, TypeVar, Type
from pydantic import BaseModel
from app.config import settings
from functools import lru_cache

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class RedisCache:
    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Get cached item and deserialize to Pydantic model."""
        data = self.client.get(key)
        if data:
            return model.model_validate_json(data)
        return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Cache Pydantic model with TTL."""
        self.client.setex(
            key,
            ttl_seconds,
            value.model_dump_json(),
        )

    def delete(self, key: str) -> None:
        """Invalidate single cache entry."""
        self.client.delete(key)

    def delete_pattern(self, pattern: str) -> int:
        """Invalidate all keys matching pattern. Returns number of keys removed."""
        removed = 0
        for key in self.client.scan_iter(match=pattern):
            removed += self.client.delete(key)
        logger.debug("Invalidated %d cache keys matching %s", removed, pattern)
        return removed


# ---- FastAPI dependency singleton ----
@lru_cache
def get_redis_cache() -> RedisCache:
    return RedisCache()
