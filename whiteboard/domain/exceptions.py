"""Domain exceptions for the Whiteboard sync client.

Infrastructure raises these; the request gateway converts them into
failure results so callers never handle exceptions for expected
conditions. The sync agent maps them to HTTP responses in exception
handlers.
"""

from typing import Any


class WhiteboardException(Exception):
    """Base exception for all Whiteboard sync client errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, key).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(WhiteboardException):
    """Raised when input validation fails (e.g. missing id or bad method)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or argument that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class NetworkException(WhiteboardException):
    """Raised by the transport when the backend could not be reached.

    Covers DNS failures, refused connections and timeouts: no HTTP
    response was received.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        details = {"url": url} if url else {}
        super().__init__(message, "NETWORK_ERROR", details)


class StorageException(WhiteboardException):
    """Raised when the key-value storage backend fails."""

    def __init__(self, operation: str, key: str | None, reason: str) -> None:
        """Initialize with operation, key and reason.

        Args:
            operation: Storage operation that failed (get, set, delete, keys).
            key: Storage key involved, if any.
            reason: Underlying error description.
        """
        super().__init__(
            f"Storage {operation} failed" + (f" for key {key!r}" if key else ""),
            "STORAGE_ERROR",
            {"operation": operation, "key": key, "reason": reason},
        )


class ActionNotFoundException(WhiteboardException):
    """Raised when a pending or failed action id is unknown."""

    def __init__(self, action_id: str) -> None:
        super().__init__(
            f"Pending action not found: {action_id}",
            "ACTION_NOT_FOUND",
            {"action_id": action_id},
        )
