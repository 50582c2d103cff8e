"""Presentation-layer dependency injection.

Services are constructed once in the application lifespan and kept on
app.state; these dependencies hand them to the routes.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from whiteboard.application.services import (
    ConnectivityMonitor,
    LocalCacheStore,
    PendingActionQueue,
    ReplayService,
    RequestGateway,
)
from whiteboard.infrastructure.security import StorageTokenProvider


def get_connectivity(request: Request) -> ConnectivityMonitor:
    return request.app.state.connectivity


def get_cache_store(request: Request) -> LocalCacheStore:
    return request.app.state.cache_store


def get_action_queue(request: Request) -> PendingActionQueue:
    return request.app.state.action_queue


def get_gateway(request: Request) -> RequestGateway:
    return request.app.state.gateway


def get_replay_service(request: Request) -> ReplayService:
    return request.app.state.replay_service


def get_token_provider(request: Request) -> StorageTokenProvider:
    return request.app.state.token_provider


_http_bearer = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Return the caller's bearer token, or None when no Authorization header was sent."""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials
