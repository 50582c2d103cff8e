"""Sync agent API schemas: status, queue contents, replay reports."""

from typing import Any

from pydantic import BaseModel, Field

from whiteboard.domain.entities.pending_action import FailedAction, PendingAction


class ConnectivityUpdate(BaseModel):
    """Body for PUT /sync/connectivity (platform network-change notification)."""

    online: bool = Field(..., description="New connectivity state")


class ConnectivityResponse(BaseModel):
    online: bool
    changed: bool = Field(..., description="True if the state actually transitioned")


class SyncStatusResponse(BaseModel):
    """Response for GET /sync/status."""

    online: bool
    state: str = Field(..., description="idle, replaying or idle_with_backlog")
    pending: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    policy: str


class PendingActionResponse(BaseModel):
    """A queued mutation with its retry bookkeeping."""

    id: str
    method: str
    path: str
    body: Any = None
    requires_auth: bool
    enqueued_at: int
    cache_key: str | None = None
    attempts: int = 0
    last_error: str | None = None
    next_attempt_at: int = 0

    @classmethod
    def from_action(
        cls,
        action: PendingAction,
        attempts: int = 0,
        last_error: str | None = None,
        next_attempt_at: int = 0,
    ) -> "PendingActionResponse":
        return cls(
            id=action.id,
            method=action.method.value,
            path=action.path,
            body=action.body,
            requires_auth=action.requires_auth,
            enqueued_at=action.enqueued_at,
            cache_key=action.cache_key,
            attempts=attempts,
            last_error=last_error,
            next_attempt_at=next_attempt_at,
        )


class FailedActionResponse(BaseModel):
    """An action moved out of the queue (orphaned, rejected or max_attempts)."""

    action: PendingActionResponse
    reason: str
    error_code: str | None = None
    error_message: str | None = None
    attempts: int
    failed_at: int

    @classmethod
    def from_failed(cls, failed: FailedAction) -> "FailedActionResponse":
        return cls(
            action=PendingActionResponse.from_action(failed.action, attempts=failed.attempts),
            reason=failed.reason.value,
            error_code=failed.error_code,
            error_message=failed.error_message,
            attempts=failed.attempts,
            failed_at=failed.failed_at,
        )


class ReplayReportResponse(BaseModel):
    """Response for POST /sync/replay."""

    replayed: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    retained: int = 0
    coalesced: bool = False
    halted: bool = False
    offline: bool = False


class ClearedResponse(BaseModel):
    """Count of removed entries (cache clear, failed list clear)."""

    removed: int = Field(..., ge=0)
