"""Domain enumerations for the Whiteboard sync client."""

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP methods the gateway issues against the backend."""

    GET = "get"
    POST = "post"
    PATCH = "patch"
    PUT = "put"
    DELETE = "delete"

    @property
    def is_mutation(self) -> bool:
        """Return True for methods that change server state (queueable)."""
        return self is not HttpMethod.GET

    @classmethod
    def values(cls) -> list[str]:
        """Return all method values as strings."""
        return [method.value for method in cls]


class ErrorCode(str, Enum):
    """Error codes produced by this layer.

    Backend codes (validation, permission, ...) are passed through as
    plain strings and are not members of this enum.
    """

    OFFLINE = "OFFLINE"
    NETWORK_ERROR = "NETWORK_ERROR"
    QUEUED = "QUEUED"
    SERVER_ERROR = "SERVER_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class QueueState(str, Enum):
    """State of the pending action queue as a whole."""

    IDLE = "idle"
    REPLAYING = "replaying"
    IDLE_WITH_BACKLOG = "idle_with_backlog"


class ReplayPolicy(str, Enum):
    """What a replay pass does after an action fails with a retryable error.

    STRICT halts the pass so later actions never overtake the failed one.
    BEST_EFFORT keeps going and may complete actions out of order.
    """

    STRICT = "strict"
    BEST_EFFORT = "best_effort"


class FailureReason(str, Enum):
    """Why an action was moved out of the queue into the failed list."""

    ORPHANED = "orphaned"
    REJECTED = "rejected"
    MAX_ATTEMPTS = "max_attempts"


class SyncEvent(str, Enum):
    """Events emitted by the replay service for caller reconciliation."""

    ACTION_REPLAYED = "action_replayed"
    ACTION_FAILED = "action_failed"
    QUEUE_DRAINED = "queue_drained"
