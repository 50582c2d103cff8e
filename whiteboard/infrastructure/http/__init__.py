"""HTTP transport to the backend and response normalization."""

from whiteboard.infrastructure.http.envelope import normalize_response, status_error_code
from whiteboard.infrastructure.http.transport import HttpxTransport

__all__ = ["HttpxTransport", "normalize_response", "status_error_code"]
