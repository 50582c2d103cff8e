"""Proxy API: runs a backend call through the offline-aware gateway.

The answer is always the gateway's envelope ({success, data?, error?,
message?, fromCache?}) with HTTP 200, including offline and queued
outcomes; callers branch on success and error.code.
"""

from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from whiteboard.api.v1.dependencies import (
    get_bearer_token,
    get_gateway,
    get_token_provider,
)
from whiteboard.application.services import RequestGateway
from whiteboard.infrastructure.security import StorageTokenProvider

router = APIRouter()

# Query parameters consumed by the proxy itself; the rest go to the backend.
_PROXY_PARAMS = frozenset({"cache_key", "enable_cache"})


def _backend_path(path: str, request: Request) -> str:
    forwarded = [
        (key, value)
        for key, value in request.query_params.multi_items()
        if key not in _PROXY_PARAMS
    ]
    return f"{path}?{urlencode(forwarded)}" if forwarded else path


@router.get("/{path:path}")
async def proxy_read(
    path: str,
    request: Request,
    cache_key: str | None = Query(default=None, description="Cache slot for this read"),
    enable_cache: bool | None = Query(default=None),
    gateway: RequestGateway = Depends(get_gateway),
    token_provider: StorageTokenProvider = Depends(get_token_provider),
    bearer: str | None = Depends(get_bearer_token),
) -> JSONResponse:
    """Read through the cache: served from cache when offline or unreachable."""
    if bearer:
        await token_provider.set_token(bearer)
    result = await gateway.request(
        "get", _backend_path(path, request), cache_key=cache_key, enable_cache=enable_cache
    )
    return JSONResponse(content=result.to_dict())


@router.api_route("/{path:path}", methods=["POST", "PUT", "PATCH", "DELETE"])
async def proxy_mutation(
    path: str,
    request: Request,
    body: Any = Body(default=None),
    cache_key: str | None = Query(default=None, description="Cache slot the mutation touches"),
    enable_cache: bool | None = Query(default=None),
    gateway: RequestGateway = Depends(get_gateway),
    token_provider: StorageTokenProvider = Depends(get_token_provider),
    bearer: str | None = Depends(get_bearer_token),
) -> JSONResponse:
    """Send a mutation, or queue it for replay when offline.

    The caller's bearer token is stored so queued actions replay with the
    same session.
    """
    if bearer:
        await token_provider.set_token(bearer)
    result = await gateway.request(
        request.method,
        _backend_path(path, request),
        body,
        cache_key=cache_key,
        enable_cache=enable_cache,
    )
    return JSONResponse(content=result.to_dict())
