"""Application-level dependencies.

Provides the Redis connection and rate limiting as FastAPI
dependencies for injection into route handlers.
"""

from __future__ import annotations

import time
from typing import AsyncGenerator, Optional

import redis.asyncio as aioredis

from app.config import get_settings
from app.exceptions import RateLimitError
from app.logging_config import get_logger
from app.metrics import RATE_LIMIT_HITS

logger = get_logger(__name__)

# Global Redis connection pool
_redis_pool: Optional[aioredis.Redis] = None


async def init_redis() -> None:
    """Initialize Redis connection pool."""
    global _redis_pool
    settings = get_settings()
    _redis_pool = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
    )
    # Test connection
    await _redis_pool.ping()


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None


async def get_redis() -> AsyncGenerator[aioredis.Redis, None]:
    """Get Redis connection as a FastAPI dependency."""
    if _redis_pool is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    yield _redis_pool


class RateLimiter:
    """Redis-backed rate limiter using sliding window."""

    def __init__(
        self,
        key_prefix: str,
        max_requests: int,
        window_seconds: int,
    ) -> None:
        self.key_prefix = key_prefix
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def check(self, identifier: str, redis: aioredis.Redis) -> None:
        """Check rate limit. Raises RateLimitError if exceeded."""
        key = f"ratelimit:{self.key_prefix}:{identifier}"
        now = time.time()
        window_start = now - self.window_seconds

        pipe = redis.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zadd(key, {str(now): now})
        pipe.zcard(key)
        pipe.expire(key, self.window_seconds)
        results = await pipe.execute()

        request_count = results[2]
        if request_count > self.max_requests:
            RATE_LIMIT_HITS.labels(
                endpoint=self.key_prefix, limit_type="sliding_window"
            ).inc()
            logger.warning(
                "rate_limit_exceeded",
                limit_type=self.key_prefix,
                request_count=request_count,
            )
            raise RateLimitError(
                limit_type=self.key_prefix,
                retry_after=self.window_seconds,
            )


MATCH_WINDOW_SECONDS = 60


def match_rate_limiter() -> RateLimiter:
    """Limiter for the matching endpoints, sized from current settings."""
    return RateLimiter(
        key_prefix="match",
        max_requests=get_settings().rate_limit_match_per_minute,
        window_seconds=MATCH_WINDOW_SECONDS,
    )
