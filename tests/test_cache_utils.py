"""
Tests for the Redis stats cache
"""
import json
import redis
from unittest.mock import MagicMock, patch

from utils.cache_utils import STATS_CACHE_KEY, CacheManager, cache_result


class TestCacheManager:
    """Cache reads and writes."""

    def test_disabled_without_client(self):
        manager = CacheManager()
        with patch("utils.cache_utils.get_redis_client", return_value=None):
            assert manager.enabled is False
            assert manager.get("k") is None
            assert manager.set("k", {"a": 1}) is False

    def test_roundtrip_through_client(self):
        client = MagicMock()
        client.get.return_value = json.dumps({"a": 1})
        manager = CacheManager(client=client)

        assert manager.set("k", {"a": 1}, expiry_seconds=30)
        client.setex.assert_called_once_with("k", 30, json.dumps({"a": 1}))
        assert manager.get("k") == {"a": 1}

    def test_redis_errors_are_misses(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        client.delete.side_effect = redis.ConnectionError("down")
        manager = CacheManager(client=client)

        assert manager.get("k") is None
        assert manager.delete("k") is False


class TestCacheResult:
    """Decorator behaviour."""

    def test_second_call_served_from_cache(self):
        store = {}
        client = MagicMock()
        client.get.side_effect = lambda key: store.get(key)
        client.setex.side_effect = lambda key, ttl, value: store.__setitem__(key, value)
        calls = []

        @cache_result(STATS_CACHE_KEY, expiry_seconds=10)
        def compute(db):
            calls.append(db)
            return {"total": len(calls)}

        with patch("utils.cache_utils.cache_manager", CacheManager(client=client)):
            assert compute("db") == {"total": 1}
            assert compute("db") == {"total": 1}

        assert len(calls) == 1
