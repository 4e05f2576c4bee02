"""
Redis caching utilities for dashboard progress data
Cache is optional: when Redis is not configured or unreachable every call is a miss
"""
import json
import logging
from typing import Any, Optional

import redis

from . import config
from .events import ALL_TOPICS, DataChanged, EventBus

logger = logging.getLogger(__name__)


def get_redis_client() -> Optional[redis.Redis]:
    """Create a Redis client from REDIS_URL, or None when caching is disabled"""
    if not config.REDIS_URL:
        return None

    client = redis.from_url(
        config.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30,
    )
    client.ping()
    logger.info("Redis connected successfully via URL")
    return client


class Cache:
    """Redis cache wrapper with automatic serialization"""

    def __init__(self, client: Optional[redis.Redis] = None):
        self.redis_client = client
        self.disabled = False

    def _get_client(self):
        """Lazy load Redis client"""
        if self.redis_client is None and not self.disabled:
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"Redis cache unavailable: {e}")
                return None
            if self.redis_client is None:
                self.disabled = True
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL (default 1 hour)"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
            logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete value from cache"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.delete(key)
            logger.debug(f"Cache DELETE: {key}")
            return True
        except Exception as e:
            logger.error(f"Cache delete error for {key}: {e}")
            return False

    def incr(self, key: str) -> Optional[int]:
        """Atomically increment a counter, returning the new value"""
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.incr(key)
            logger.debug(f"Cache INCR: {key} -> {value}")
            return value
        except Exception as e:
            logger.error(f"Cache incr error for {key}: {e}")
            return None


# Global cache instance
cache = Cache()


def build_progress_version_key(user_id: str) -> str:
    return f"qbo_progress_version:{user_id}"


def build_progress_key(user_id: str, version: int) -> str:
    return f"qbo_progress:{user_id}:v{version}"


def get_progress_version(user_id: str) -> int:
    """
    Current generation of a user's progress data.

    Rows are cached under the generation read before they were computed, so a
    write that lands mid-computation leaves them under an outdated key.
    """
    return int(cache.get(build_progress_version_key(user_id)) or 0)


def get_progress_cached(user_id: str, version: int) -> Optional[list]:
    """Get chart data for a user's outcomes from cache"""
    return cache.get(build_progress_key(user_id, version))


def set_progress_cached(
    user_id: str, version: int, chart_data: list, ttl: Optional[int] = None
) -> bool:
    return cache.set(
        build_progress_key(user_id, version), chart_data, ttl or config.PROGRESS_CACHE_TTL
    )


def invalidate_progress_cache(user_id: str) -> bool:
    """Invalidate chart data when any input collection changes; stale generations expire by TTL"""
    return cache.incr(build_progress_version_key(user_id)) is not None


def register_cache_invalidation(bus: EventBus):
    """Drop a user's cached progress whenever one of the input collections changes"""

    def on_data_changed(event: DataChanged):
        invalidate_progress_cache(event.user_id)

    return bus.subscribe_many(ALL_TOPICS, on_data_changed)
