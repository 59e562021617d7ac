"""
Fixed-window request rate limiter backed by Redis.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from wardrobe.core.config import settings
from wardrobe.core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


@dataclass
class RateLimitStatus:
    """Result of counting one request against a client's quota."""
    allowed: bool
    limit: int
    remaining: int
    reset_after: int  # seconds until the window closes


class RateLimiter:
    """
    Count requests per client key in fixed windows.

    Each window is a Redis key ``ratelimit:{client}:{window_index}`` that
    expires together with the window.
    """

    def __init__(
        self,
        redis_client: Optional[Redis] = None,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        self.redis_client = redis_client or get_redis_client()
        if max_requests is None:
            max_requests = settings.RATE_LIMIT_MAX_REQUESTS
        if window_seconds is None:
            window_seconds = settings.RATE_LIMIT_WINDOW_SECONDS
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def hit(self, client_key: str, now: Optional[float] = None) -> RateLimitStatus:
        """
        Record one request and report whether it is within quota.

        If Redis is unavailable the request is allowed and the failure logged.

        Args:
            client_key: Identifier of the caller (client IP address)
            now: Current epoch seconds (for tests)

        Returns:
            RateLimitStatus
        """
        now = time.time() if now is None else now
        window_index = int(now // self.window_seconds)
        reset_after = int(self.window_seconds - (now % self.window_seconds)) or 1
        key = f"ratelimit:{client_key}:{window_index}"

        try:
            count = self.redis_client.incr(key)
            if count == 1:
                self.redis_client.expire(key, self.window_seconds)
        except RedisError as e:
            logger.warning(f"⚠️  Rate limiter unavailable, allowing request: {e}")
            return RateLimitStatus(True, self.max_requests, self.max_requests, reset_after)

        return RateLimitStatus(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_after=reset_after,
        )
