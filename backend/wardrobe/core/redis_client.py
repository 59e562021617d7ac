"""
Shared Redis connection used for sessions and rate limit counters.
"""
from functools import lru_cache

import redis
from redis import Redis

from wardrobe.core.config import settings


@lru_cache
def get_redis_client() -> Redis:
    """Return the process-wide Redis client (connections are opened lazily)."""
    return redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        socket_keepalive=True,
        health_check_interval=30,
    )
