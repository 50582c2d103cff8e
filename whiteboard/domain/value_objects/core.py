"""Domain value objects for the Whiteboard sync client.

ApiResponse is the single result type of the request gateway: every call
returns one, failures included, so calling code never needs exception
handling for expected conditions (offline, network error, server error).
"""

from dataclasses import dataclass
from typing import Any

from whiteboard.domain.enums import ErrorCode

# HTTP statuses and codes that mean the session is no longer valid.
_AUTH_STATUSES = frozenset({401, 403})
_AUTH_CODES = frozenset({ErrorCode.UNAUTHORIZED.value, ErrorCode.FORBIDDEN.value})


@dataclass(frozen=True)
class ApiError:
    """Error part of a failure result.

    code is a string so backend codes pass through unchanged; this layer's
    own codes come from ErrorCode.
    """

    code: str
    message: str
    status: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.status is not None:
            data["status"] = self.status
        return data


@dataclass(frozen=True)
class ApiResponse:
    """Canonical {success, data?, error?} result with cache provenance."""

    success: bool
    data: Any = None
    error: ApiError | None = None
    message: str | None = None
    from_cache: bool = False

    @classmethod
    def ok(
        cls, data: Any = None, message: str | None = None, from_cache: bool = False
    ) -> "ApiResponse":
        """Build a success result."""
        return cls(success=True, data=data, message=message, from_cache=from_cache)

    @classmethod
    def fail(
        cls,
        code: ErrorCode | str,
        message: str,
        status: int | None = None,
    ) -> "ApiResponse":
        """Build a failure result; ErrorCode members are stored by value."""
        code_str = code.value if isinstance(code, ErrorCode) else str(code)
        return cls(success=False, error=ApiError(code=code_str, message=message, status=status))

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error else None

    @property
    def is_auth_error(self) -> bool:
        """Return True if the failure means the session must be renewed."""
        if self.error is None:
            return False
        return self.error.status in _AUTH_STATUSES or self.error.code in _AUTH_CODES

    def to_dict(self) -> dict[str, Any]:
        """Serialize as the envelope shape (camelCase fromCache)."""
        body: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            body["data"] = self.data
        if self.error is not None:
            body["error"] = self.error.to_dict()
        if self.message is not None:
            body["message"] = self.message
        if self.from_cache:
            body["fromCache"] = True
        return body
