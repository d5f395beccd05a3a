"""Shared API dependencies.

Provides per-client rate limiting and request-size validation
as injectable FastAPI dependencies and helpers.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

from fastapi import Depends, Request

import redis.asyncio as aioredis
from app.config import get_settings
from app.dependencies import get_redis, match_rate_limiter
from app.exceptions import ValidationError
from app.logging_config import get_logger

logger = get_logger(__name__)


def _client_hash(request: Request) -> str:
    """Anonymize the client IP so raw addresses never reach Redis."""
    client_ip = request.client.host if request.client else "unknown"
    return hashlib.sha256(client_ip.encode()).hexdigest()[:16]


async def rate_limit_match(
    request: Request,
    redis: aioredis.Redis = Depends(get_redis),
) -> None:
    """Apply per-IP rate limiting for matching endpoints."""
    await match_rate_limiter().check(_client_hash(request), redis)


def ensure_skill_list_size(field: str, skills: Sequence[str]) -> None:
    """Reject skill lists longer than the configured maximum."""
    limit = get_settings().max_skills_per_list
    if len(skills) > limit:
        raise ValidationError(
            f"Too many skills in {field}",
            details={"field": field, "max_items": limit, "received": len(skills)},
        )
