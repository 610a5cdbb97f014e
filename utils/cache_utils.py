"""
Redis caching for read-heavy aggregate endpoints.
Disabled when REDIS_URL is not configured; Redis errors behave as cache misses.
"""
import json
import logging
from functools import wraps
from typing import Any, Optional, Callable
import redis
from config.settings import settings

logger = logging.getLogger(__name__)

# Redis client (lazy initialization)
_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """Get Redis client with lazy initialization, None when caching is off"""
    global _redis_client
    if _redis_client is None and settings.REDIS_URL:
        _redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis_client


class CacheManager:
    """Cache management utilities"""

    def __init__(self, client: Optional[redis.Redis] = None):
        self._client = client

    @property
    def redis_client(self) -> Optional[redis.Redis]:
        return self._client or get_redis_client()

    @property
    def enabled(self) -> bool:
        return self.redis_client is not None

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        if not self.enabled:
            return None
        try:
            cached_value = self.redis_client.get(key)
            if cached_value:
                return json.loads(cached_value)
        except (redis.RedisError, json.JSONDecodeError) as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
        return None

    def set(self, key: str, value: Any, expiry_seconds: int = 300) -> bool:
        """Set value in cache"""
        if not self.enabled:
            return False
        try:
            serialized_value = json.dumps(value, default=str)
            return bool(self.redis_client.setex(key, expiry_seconds, serialized_value))
        except (redis.RedisError, TypeError) as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache"""
        if not self.enabled:
            return False
        try:
            return bool(self.redis_client.delete(key))
        except redis.RedisError as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)
            return False


# Global cache manager instance
cache_manager = CacheManager()

STATS_CACHE_KEY = "cache:stats"


def cache_result(key: str, expiry_seconds: int = 300):
    """
    Cache a function's JSON-serializable result under a fixed key.
    Arguments are not part of the key (the wrapped functions take only a
    db session).
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            cached_result = cache_manager.get(key)
            if cached_result is not None:
                return cached_result

            result = func(*args, **kwargs)
            cache_manager.set(key, result, expiry_seconds)
            return result

        return wrapper
    return decorator


def invalidate_stats_cache() -> None:
    cache_manager.delete(STATS_CACHE_KEY)
