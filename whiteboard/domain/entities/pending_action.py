"""Pending action domain entities.

A PendingAction is a mutation recorded while offline and replayed later.
Actions are immutable once enqueued; retry bookkeeping lives beside them
in ReplayAttempt, and permanently failed actions are kept as FailedAction.
"""

from dataclasses import dataclass
from typing import Any

from whiteboard.domain.enums import FailureReason, HttpMethod
from whiteboard.domain.exceptions import ValidationException


@dataclass(frozen=True)
class PendingAction:
    """Immutable queued mutation (FIFO member of the pending action queue)."""

    id: str
    method: HttpMethod
    path: str
    body: Any
    requires_auth: bool
    enqueued_at: int
    cache_key: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate action rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Action ID is required", field="id")
        if not isinstance(self.method, HttpMethod) or not self.method.is_mutation:
            raise ValidationException(
                f"Only mutations can be queued, got {self.method!r}", field="method"
            )
        if not self.path:
            raise ValidationException("Action path is required", field="path")

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used by the persisted queue."""
        return {
            "id": self.id,
            "method": self.method.value,
            "path": self.path,
            "body": self.body,
            "requiresAuth": self.requires_auth,
            "enqueuedAt": self.enqueued_at,
            "cacheKey": self.cache_key,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PendingAction":
        """Deserialize from the persisted queue.

        Raises:
            ValidationException: If a required field is missing or invalid.
        """
        try:
            method = HttpMethod(str(data["method"]).lower())
            return cls(
                id=data["id"],
                method=method,
                path=data["path"],
                body=data.get("body"),
                requires_auth=bool(data.get("requiresAuth", True)),
                enqueued_at=int(data["enqueuedAt"]),
                cache_key=data.get("cacheKey"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationException(f"Malformed pending action: {e}") from e


@dataclass(frozen=True)
class ReplayAttempt:
    """Retry bookkeeping for one pending action."""

    attempts: int = 0
    last_error: str | None = None
    next_attempt_at: int = 0

    def is_due(self, now_ms: int) -> bool:
        """Return True if the backoff window has passed."""
        return now_ms >= self.next_attempt_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempts": self.attempts,
            "lastError": self.last_error,
            "nextAttemptAt": self.next_attempt_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReplayAttempt":
        return cls(
            attempts=int(data.get("attempts", 0)),
            last_error=data.get("lastError"),
            next_attempt_at=int(data.get("nextAttemptAt", 0)),
        )


@dataclass(frozen=True)
class FailedAction:
    """An action removed from the queue after it failed permanently.

    Kept so that failures are visible to the caller instead of dropped.
    """

    action: PendingAction
    reason: FailureReason
    error_code: str | None
    error_message: str | None
    attempts: int
    failed_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.to_dict(),
            "reason": self.reason.value,
            "errorCode": self.error_code,
            "errorMessage": self.error_message,
            "attempts": self.attempts,
            "failedAt": self.failed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FailedAction":
        return cls(
            action=PendingAction.from_dict(data["action"]),
            reason=FailureReason(data["reason"]),
            error_code=data.get("errorCode"),
            error_message=data.get("errorMessage"),
            attempts=int(data.get("attempts", 0)),
            failed_at=int(data.get("failedAt", 0)),
        )
