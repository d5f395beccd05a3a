"""Shared test fixtures for the DevShowcase matching backend."""

from collections.abc import AsyncGenerator

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings, get_settings
from app.dependencies import get_redis
from app.main import create_app


@pytest.fixture
def override_settings(monkeypatch):
    """Apply DSC_* environment overrides and refresh cached settings."""

    def _apply(**values) -> Settings:
        for key, value in values.items():
            monkeypatch.setenv(f"DSC_{key.upper()}", str(value))
        get_settings.cache_clear()
        return get_settings()

    yield _apply
    get_settings.cache_clear()


@pytest.fixture
async def fake_redis() -> AsyncGenerator:
    """Provide a fake Redis instance for testing."""
    server = fakeredis.FakeServer()
    redis = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    yield redis
    await redis.aclose()


@pytest.fixture
async def app(fake_redis):
    """Create a test application wired to fake Redis."""
    application = create_app()

    async def override_get_redis():
        yield fake_redis

    application.dependency_overrides[get_redis] = override_get_redis
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator:
    """Provide an async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
