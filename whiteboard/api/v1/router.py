"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from whiteboard.api.v1.dependencies.
"""

from fastapi import APIRouter

from whiteboard.api.v1.endpoints import cache, health, proxy, sync

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(sync.router, prefix="/sync", tags=["sync"])
api_router.include_router(cache.router, prefix="/cache", tags=["cache"])
api_router.include_router(proxy.router, prefix="/proxy", tags=["proxy"])
