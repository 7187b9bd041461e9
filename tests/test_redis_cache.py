"""
Redis Cache Tests - AI Use-Case Portfolio
tests/test_redis_cache.py

Tests for Redis caching functionality including cache hits,
misses, invalidation, and graceful degradation.
"""
import pytest
import redis
from unittest.mock import patch, MagicMock
from pydantic import BaseModel

from app.config import settings
from app.services.redis_cache import RedisCache
from app.services import cache as cache_service
from app.services.cache import (
    CACHE_KEY_METADATA,
    TTL_METADATA,
    TTL_USE_CASES,
    cached,
    get_cache,
    invalidate_metadata_cache,
    invalidate_use_case_cache,
    reset_cache,
)


class MockModel(BaseModel):
    """Mock Pydantic model for testing."""
    id: str
    name: str


class TestRedisCache:
    """Tests for the RedisCache class."""

    def test_redis_cache_init(self):
        """Test RedisCache initialization."""
        with patch('app.services.redis_cache.redis.from_url') as mock_from_url:
            cache = RedisCache("redis://cache:6379/1")
            mock_from_url.assert_called_once_with(
                "redis://cache:6379/1",
                decode_responses=True,
                socket_connect_timeout=5,
            )
            assert cache.client is mock_from_url.return_value

    def test_cache_set_and_get(self):
        """Test setting and getting cached values."""
        with patch('app.services.redis_cache.redis.from_url') as mock_from_url:
            mock_client = MagicMock()
            mock_from_url.return_value = mock_client

            cache = RedisCache()
            model = MockModel(id="123", name="Test")

            cache.set("test:key", model, 300)
            mock_client.setex.assert_called_once_with("test:key", 300, model.model_dump_json())

            mock_client.get.return_value = model.model_dump_json()
            result = cache.get("test:key", MockModel)
            assert result == model

    def test_cache_get_miss(self):
        """Test cache miss returns None."""
        with patch('app.services.redis_cache.redis.from_url') as mock_from_url:
            mock_client = MagicMock()
            mock_client.get.return_value = None
            mock_from_url.return_value = mock_client

            assert RedisCache().get("nonexistent:key", MockModel) is None

    def test_cache_delete_pattern(self):
        """Test deleting cache entries by pattern."""
        with patch('app.services.redis_cache.redis.from_url') as mock_from_url:
            mock_client = MagicMock()
            mock_client.scan_iter.return_value = ["key:1", "key:2", "key:3"]
            mock_client.delete.return_value = 1
            mock_from_url.return_value = mock_client

            removed = RedisCache().delete_pattern("key:*")

            mock_client.scan_iter.assert_called_once_with(match="key:*")
            assert mock_client.delete.call_count == 3
            assert removed == 3


@pytest.fixture
def cache_enabled():
    """Enable caching for one test; the suite runs with CACHE_ENABLED=false."""
    reset_cache()
    with patch.object(settings, "CACHE_ENABLED", True):
        yield
    reset_cache()


class TestCacheSingleton:
    """Tests for the cache singleton."""

    def test_disabled_cache_returns_none(self):
        reset_cache()
        with patch('app.services.cache.RedisCache') as mock_cache_class:
            assert get_cache() is None
            mock_cache_class.assert_not_called()

    def test_get_cache_returns_instance(self, cache_enabled):
        with patch('app.services.cache.RedisCache') as mock_cache_class:
            mock_cache_class.return_value.client.ping.return_value = True
            assert get_cache() is mock_cache_class.return_value

    def test_get_cache_returns_none_when_redis_unavailable(self, cache_enabled):
        with patch('app.services.cache.RedisCache') as mock_cache_class:
            mock_cache_class.return_value.client.ping.side_effect = redis.ConnectionError("down")
            assert get_cache() is None

    def test_get_cache_singleton_behavior(self, cache_enabled):
        with patch('app.services.cache.RedisCache') as mock_cache_class:
            cache1 = get_cache()
            cache2 = get_cache()
            assert cache1 is cache2
            assert mock_cache_class.call_count == 1


class TestCacheAside:
    """Tests for the cached() read-through helper."""

    def test_hit_skips_loader(self):
        mock_cache = MagicMock()
        mock_cache.get.return_value = MockModel(id="1", name="cached")
        loader = MagicMock()

        with patch.object(cache_service, "get_cache", return_value=mock_cache):
            result = cached("k", MockModel, 60, loader)

        assert result.name == "cached"
        loader.assert_not_called()

    def test_miss_loads_and_stores(self):
        mock_cache = MagicMock()
        mock_cache.get.return_value = None
        fresh = MockModel(id="1", name="fresh")

        with patch.object(cache_service, "get_cache", return_value=mock_cache):
            result = cached("k", MockModel, 60, lambda: fresh)

        assert result is fresh
        mock_cache.set.assert_called_once_with("k", fresh, 60)

    def test_redis_errors_fall_back_to_loader(self):
        mock_cache = MagicMock()
        mock_cache.get.side_effect = redis.ConnectionError("down")
        mock_cache.set.side_effect = redis.ConnectionError("down")
        fresh = MockModel(id="1", name="fresh")

        with patch.object(cache_service, "get_cache", return_value=mock_cache):
            assert cached("k", MockModel, 60, lambda: fresh) is fresh

    def test_no_cache_calls_loader(self):
        with patch.object(cache_service, "get_cache", return_value=None):
            assert cached("k", MockModel, 60, lambda: MockModel(id="1", name="x")).name == "x"


class TestCacheInvalidation:
    """Tests for cache invalidation behavior."""

    def test_single_use_case_invalidation(self):
        mock_cache = MagicMock()
        with patch.object(cache_service, "get_cache", return_value=mock_cache):
            invalidate_use_case_cache("uc-1")

        mock_cache.delete.assert_called_once_with("use_case:uc-1")
        mock_cache.delete_pattern.assert_called_once_with("use_cases:*")

    def test_full_use_case_invalidation(self):
        mock_cache = MagicMock()
        with patch.object(cache_service, "get_cache", return_value=mock_cache):
            invalidate_use_case_cache()

        mock_cache.delete.assert_not_called()
        assert [c.args[0] for c in mock_cache.delete_pattern.call_args_list] == ["use_case:*", "use_cases:*"]

    def test_metadata_invalidation(self):
        mock_cache = MagicMock()
        with patch.object(cache_service, "get_cache", return_value=mock_cache):
            invalidate_metadata_cache()
        mock_cache.delete.assert_called_once_with(CACHE_KEY_METADATA)

    def test_invalidation_errors_are_logged_not_raised(self):
        mock_cache = MagicMock()
        mock_cache.delete.side_effect = redis.ConnectionError("down")
        with patch.object(cache_service, "get_cache", return_value=mock_cache):
            invalidate_use_case_cache("uc-1")
            invalidate_metadata_cache()


class TestTTLConstants:
    """Tests for TTL constant values."""

    def test_ttl_use_cases(self):
        """Use case lists and items are cached for 5 minutes."""
        assert TTL_USE_CASES == 300

    def test_ttl_metadata(self):
        """Metadata is cached for 1 hour."""
        assert TTL_METADATA == 3600
