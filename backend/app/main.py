"""FastAPI application factory for the matching service."""

from __future__ import annotations

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from app.config import Settings, get_settings
from app.dependencies import close_redis, get_redis, init_redis
from app.exceptions import DevShowcaseError, InternalError
from app.logging_config import get_logger, setup_logging
from app.metrics import APP_INFO, HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL
from gateway.health import HealthMonitor

logger = get_logger(__name__)

# Label for requests that matched no route (404s, mounted apps)
UNMATCHED_ROUTE = "unmatched"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging()
    APP_INFO.info({"version": settings.app_version, "environment": settings.environment.value})

    await init_redis()
    logger.info(
        "matching_service_started",
        version=settings.app_version,
        environment=settings.environment.value,
        rate_limit_per_minute=settings.rate_limit_match_per_minute,
        max_skills_per_list=settings.max_skills_per_list,
        max_batch_targets=settings.max_batch_targets,
    )
    try:
        yield
    finally:
        await close_redis()
        logger.info("matching_service_stopped")


def route_template(request: Request) -> str:
    """Path template of the matched route, e.g. ``/api/v1/match/batch``.

    Raw paths would give Prometheus one label value per distinct URL.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


async def _observe_request(request: Request, call_next) -> Response:
    structlog.contextvars.clear_contextvars()
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(request_id=request_id, method=request.method)

    started = time.perf_counter()
    response: Response = await call_next(request)
    elapsed = time.perf_counter() - started

    route = route_template(request)
    HTTP_REQUESTS_TOTAL.labels(
        method=request.method, endpoint=route, status_code=response.status_code
    ).inc()
    HTTP_REQUEST_DURATION.labels(method=request.method, endpoint=route).observe(elapsed)

    if route.startswith("/api/"):
        logger.info(
            "request_completed",
            route=route,
            status_code=response.status_code,
            duration_ms=round(elapsed * 1000, 2),
        )

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Response-Time"] = f"{elapsed:.4f}"
    return response


async def _handle_app_error(_request: Request, exc: DevShowcaseError) -> JSONResponse:
    logger.warning("request_rejected", code=exc.code, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers())


async def _handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error_type=type(exc).__name__)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def _add_system_routes(app: FastAPI, settings: Settings) -> None:
    @app.get("/health", tags=["System"])
    async def health_check() -> dict:
        """Liveness: the process is up."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment.value,
        }

    @app.get("/health/ready", tags=["System"])
    async def readiness_check(redis: aioredis.Redis = Depends(get_redis)) -> JSONResponse:
        """Readiness: the rate limiter's Redis answers."""
        report = await HealthMonitor(redis).check_all()
        return JSONResponse(
            status_code=200 if report["status"] == "healthy" else 503,
            content=report,
        )

    if settings.metrics_enabled:
        app.mount("/metrics", make_asgi_app())


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Tech stack compatibility scoring for DevShowcase",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.middleware("http")(_observe_request)
    app.add_exception_handler(DevShowcaseError, _handle_app_error)
    app.add_exception_handler(Exception, _handle_unexpected)

    from api.v1.router import api_v1_router

    app.include_router(api_v1_router, prefix="/api/v1")
    _add_system_routes(app, settings)
    return app


app = create_app()
