"""Readiness checks.

Scoring itself needs nothing external; only the rate limiter depends on
Redis, so readiness is a timed Redis ping.
"""

from __future__ import annotations

import time
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.logging_config import get_logger

logger = get_logger(__name__)


class HealthMonitor:
    """Reports whether the rate limiter backend is reachable."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self.redis = redis

    async def check_all(self) -> dict[str, Any]:
        redis_check = await self._ping_redis()
        return {
            "status": "healthy" if redis_check["status"] == "ok" else "degraded",
            "checks": {"redis": redis_check},
        }

    async def _ping_redis(self) -> dict[str, Any]:
        started = time.perf_counter()
        try:
            await self.redis.ping()
        except (RedisError, OSError) as exc:
            logger.error("redis_ping_failed", error_type=type(exc).__name__)
            return {"status": "error"}
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        return {"status": "ok", "latency_ms": latency_ms}
