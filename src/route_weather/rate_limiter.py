"""Sliding-window rate limiting backed by Redis."""

import logging
import time
import uuid
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from route_weather.config import (
    REDIS_URL,
    RATE_LIMIT_REQUESTS_PER_SECOND,
    RATE_LIMIT_REDIS_KEY_PREFIX
)

logger = logging.getLogger(__name__)


class RateLimiter:
    """Per-client rate limiter using a Redis sorted set per client.

    Each request is stored with its timestamp as score; entries older than
    the window are trimmed before counting. Requests are allowed if Redis is
    unavailable.
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        max_requests: int = RATE_LIMIT_REQUESTS_PER_SECOND,
        window_size: float = 1.0
    ):
        """Initialize rate limiter.

        Args:
            redis_client: Optional Redis client. If None, creates new client.
            max_requests: Requests allowed per client within the window
            window_size: Window length in seconds
        """
        self.redis_client = redis_client or redis.from_url(REDIS_URL)
        self.max_requests = max_requests
        self.key_prefix = RATE_LIMIT_REDIS_KEY_PREFIX
        self.window_size = window_size

    def _key(self, client_id: str) -> str:
        return f"{self.key_prefix}:{client_id}"

    async def is_allowed(self, client_id: str) -> tuple[bool, int]:
        """Check if a request from a client is allowed under the rate limit.

        Args:
            client_id: Client identifier, usually the remote address

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
        """
        key = self._key(client_id)
        try:
            now = time.time()
            window_start = now - self.window_size
            # Unique member so simultaneous requests are all counted
            member = f"{now:.6f}:{uuid.uuid4().hex[:8]}"

            pipe = self.redis_client.pipeline()
            pipe.zremrangebyscore(key, 0, window_start)
            pipe.zadd(key, {member: now})
            pipe.zcard(key)
            pipe.expire(key, max(1, int(self.window_size * 2)))
            _, _, request_count, _ = await pipe.execute()

        except (RedisError, OSError) as e:
            logger.error(f"Rate limiter error: {e}")
            return True, 0

        if request_count > self.max_requests:
            retry_after = max(1, int(self.window_size))
            logger.debug(f"Rate limited {client_id}: count={request_count}, max={self.max_requests}")
            return False, retry_after

        return True, 0

    async def close(self):
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
