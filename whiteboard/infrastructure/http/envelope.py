"""Response envelope normalization at the transport boundary.

The backend answers with {success, data?, error?}. Some endpoints (and
framework-level errors) return a bare payload or a {statusCode, message,
error} body instead. normalize_response turns every answer into the
canonical ApiResponse before any other logic sees it.
"""

from __future__ import annotations

import re
from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from whiteboard.domain.enums import ErrorCode
from whiteboard.domain.value_objects.core import ApiResponse

# Backend error codes are UPPER_SNAKE; anything else is a human label.
_CODE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")

_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    410: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
}


class EnvelopeError(BaseModel):
    """Error object inside the backend envelope."""

    code: str
    message: str = ""


class Envelope(BaseModel):
    """Backend response envelope."""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    error: EnvelopeError | None = None
    message: str | None = None


def status_error_code(status_code: int) -> ErrorCode:
    """Map an HTTP error status to this layer's error code."""
    return _STATUS_CODES.get(status_code, ErrorCode.SERVER_ERROR)


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"


def _parse_envelope(body: Any) -> Envelope | None:
    if not isinstance(body, dict) or "success" not in body:
        return None
    try:
        return Envelope.model_validate(body)
    except ValidationError:
        return None


def _message_from_body(body: dict[str, Any]) -> str | None:
    message = body.get("message")
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    if isinstance(message, str) and message:
        return message
    return None


def _loose_failure(body: dict[str, Any], code: str, message: str) -> tuple[str, str]:
    """Pull a code and message out of an error body that is not a valid envelope."""
    raw_error = body.get("error")
    error_message = None
    if isinstance(raw_error, dict):
        if isinstance(raw_error.get("code"), str) and raw_error["code"]:
            code = raw_error["code"]
        if isinstance(raw_error.get("message"), str) and raw_error["message"]:
            error_message = raw_error["message"]
    elif isinstance(raw_error, str) and raw_error:
        if _CODE_RE.match(raw_error):
            code = raw_error
        else:
            return code, _message_from_body(body) or raw_error
    return code, error_message or _message_from_body(body) or message


def normalize_response(status_code: int, body: Any) -> ApiResponse:
    """Build the canonical result from an HTTP status and decoded JSON body.

    Args:
        status_code: HTTP status of the answer.
        body: Decoded JSON body, or None when empty or not JSON.

    Returns:
        ApiResponse; backend error codes and messages pass through unchanged.
    """
    envelope = _parse_envelope(body)
    refused = isinstance(body, dict) and body.get("success") is False
    if 200 <= status_code < 300:
        if envelope is None and refused:
            code, message = _loose_failure(body, ErrorCode.SERVER_ERROR.value, "Request failed")
            return ApiResponse.fail(code, message, status_code)
        if envelope is None:
            return ApiResponse.ok(body)
        if envelope.success:
            return ApiResponse.ok(envelope.data, message=envelope.message)
        if envelope.error is not None:
            return ApiResponse.fail(envelope.error.code, envelope.error.message, status_code)
        return ApiResponse.fail(
            ErrorCode.SERVER_ERROR, envelope.message or "Request failed", status_code
        )

    if envelope is not None and envelope.error is not None:
        return ApiResponse.fail(envelope.error.code, envelope.error.message, status_code)

    code: str = status_error_code(status_code).value
    message = _reason(status_code)
    if isinstance(body, dict):
        code, message = _loose_failure(body, code, message)
    return ApiResponse.fail(code, message, status_code)
