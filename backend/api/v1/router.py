"""API v1 router aggregation.

Combines all v1 route modules into a single router.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.v1.routes.match import router as match_router

api_v1_router = APIRouter()

api_v1_router.include_router(match_router, tags=["Compatibility"])
