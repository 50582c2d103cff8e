"""Domain value objects (immutable, no identity)."""

from whiteboard.domain.value_objects.core import ApiError, ApiResponse

__all__ = ["ApiError", "ApiResponse"]
