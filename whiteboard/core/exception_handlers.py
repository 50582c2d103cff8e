"""Exception handlers for the sync agent API.

Errors are answered in the same {success: false, error: {code, message,
status}} envelope the proxy returns, so callers parse one shape. Register
with register_exception_handlers(app).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from whiteboard.core.config import get_settings
from whiteboard.domain.enums import ErrorCode
from whiteboard.domain.exceptions import WhiteboardException
from whiteboard.domain.value_objects.core import ApiResponse

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "ACTION_NOT_FOUND": 404,
    "NETWORK_ERROR": 502,
    "STORAGE_ERROR": 503,
}


def error_response(
    status_code: int,
    code: ErrorCode | str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    """Build an error envelope; details are added under error.details when given."""
    body = ApiResponse.fail(code, message, status_code).to_dict()
    if details:
        body["error"]["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body)


def _whiteboard_exception_handler(
    request: Request, exc: WhiteboardException
) -> JSONResponse:
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return error_response(status, exc.error_code, exc.message, exc.details)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(
        422, ErrorCode.VALIDATION_ERROR, "Request validation failed", exc.errors()
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    code = ErrorCode.NOT_FOUND if exc.status_code == 404 else "HTTP_ERROR"
    return error_response(exc.status_code, code, str(exc.detail))


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 with the exception text only in debug mode."""
    logger.exception("Unhandled exception on %s", request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return error_response(500, ErrorCode.UNKNOWN_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WhiteboardException, _whiteboard_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
