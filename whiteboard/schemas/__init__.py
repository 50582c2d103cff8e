"""Pydantic schemas for the sync agent API."""

from whiteboard.schemas.health import HealthResponse
from whiteboard.schemas.sync import (
    ClearedResponse,
    ConnectivityResponse,
    ConnectivityUpdate,
    FailedActionResponse,
    PendingActionResponse,
    ReplayReportResponse,
    SyncStatusResponse,
)

__all__ = [
    "ClearedResponse",
    "ConnectivityResponse",
    "ConnectivityUpdate",
    "FailedActionResponse",
    "HealthResponse",
    "PendingActionResponse",
    "ReplayReportResponse",
    "SyncStatusResponse",
]
