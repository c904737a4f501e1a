# hwms/core/redis.py
"""
Redis connection and caching utilities.
Redis is used for:
- Analytics summary caching (per actor and hospital scope)

The app should boot even if Redis is unavailable (degraded mode).
"""

import logging
from functools import lru_cache
from typing import Optional

import redis

from hwms.core.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_redis_client() -> Optional[redis.Redis]:
    """
    Get Redis client instance.
    Returns None if Redis is not configured or unavailable.
    """
    settings = get_settings()

    if not settings.redis_url:
        logger.warning("REDIS_URL not set. Redis features will be disabled.")
        return None

    try:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
        logger.info("Redis connection established successfully.")
        return client
    except redis.RedisError as e:
        logger.warning(
            f"Failed to connect to Redis: {e}. Running in degraded mode (no caching)."
        )
        return None


def cache_get(key: str) -> Optional[str]:
    """Get value from cache. Returns None if Redis unavailable or key not found."""
    client = get_redis_client()
    if not client:
        return None
    try:
        return client.get(key)
    except redis.RedisError as e:
        logger.warning(f"Redis GET error for key '{key}': {e}")
        return None


def cache_set(key: str, value: str, ttl: int = 60) -> bool:
    """Set value in cache with TTL (seconds). Returns False if Redis unavailable."""
    client = get_redis_client()
    if not client:
        return False
    try:
        client.setex(key, ttl, value)
        return True
    except redis.RedisError as e:
        logger.warning(f"Redis SET error for key '{key}': {e}")
        return False
