"""normalize_response: every backend answer becomes one canonical ApiResponse."""

import pytest

from whiteboard.domain.enums import ErrorCode
from whiteboard.infrastructure.http import normalize_response, status_error_code


def test_success_envelope() -> None:
    result = normalize_response(200, {"success": True, "data": [1, 2], "message": "ok"})
    assert result.success
    assert result.data == [1, 2]
    assert result.message == "ok"


def test_bare_payload_on_success_is_wrapped() -> None:
    result = normalize_response(200, [{"id": "c1"}])
    assert result.success
    assert result.data == [{"id": "c1"}]


def test_empty_body_on_success() -> None:
    result = normalize_response(204, None)
    assert result.success
    assert result.data is None


def test_failure_envelope_on_2xx() -> None:
    result = normalize_response(
        200, {"success": False, "error": {"code": "QUOTA", "message": "Too many"}}
    )
    assert not result.success
    assert result.error_code == "QUOTA"
    assert result.error.message == "Too many"


def test_failure_envelope_without_error_object() -> None:
    result = normalize_response(200, {"success": False, "message": "nope"})
    assert result.error_code == ErrorCode.SERVER_ERROR.value
    assert result.error.message == "nope"


@pytest.mark.parametrize(
    ("body", "code", "message"),
    [
        ({"success": False, "error": {"message": "denied"}}, "SERVER_ERROR", "denied"),
        ({"success": False, "error": "Forbidden"}, "SERVER_ERROR", "Forbidden"),
        ({"success": False, "error": {"code": 7}}, "SERVER_ERROR", "Request failed"),
        ({"success": False, "error": "COURSE_LOCKED"}, "COURSE_LOCKED", "Request failed"),
    ],
)
def test_refusal_with_malformed_error_is_still_a_failure(
    body: dict, code: str, message: str
) -> None:
    result = normalize_response(200, body)
    assert not result.success
    assert result.error_code == code
    assert result.error.message == message
    assert result.error.status == 200


def test_body_without_success_key_is_a_bare_payload() -> None:
    result = normalize_response(200, {"error": "not an envelope", "items": []})
    assert result.success
    assert result.data == {"error": "not an envelope", "items": []}


def test_malformed_error_object_on_4xx() -> None:
    result = normalize_response(403, {"success": False, "error": {"message": "denied"}})
    assert result.error_code == "FORBIDDEN"
    assert result.error.message == "denied"


def test_error_envelope_code_passes_through() -> None:
    result = normalize_response(
        422, {"success": False, "error": {"code": "DUE_DATE_PASSED", "message": "Closed"}}
    )
    assert result.error_code == "DUE_DATE_PASSED"
    assert result.error.status == 422


def test_framework_error_body() -> None:
    """{statusCode, message[], error} bodies: list messages joined, label ignored."""
    result = normalize_response(
        400,
        {
            "statusCode": 400,
            "message": ["title must be a string", "title is empty"],
            "error": "Bad Request",
        },
    )
    assert result.error_code == "VALIDATION_ERROR"
    assert result.error.message == "title must be a string; title is empty"


def test_upper_snake_error_field_is_a_code() -> None:
    result = normalize_response(403, {"error": "COURSE_LOCKED", "message": "Locked"})
    assert result.error_code == "COURSE_LOCKED"
    assert result.error.message == "Locked"


def test_non_json_error_uses_reason_phrase() -> None:
    result = normalize_response(502, None)
    assert result.error_code == "SERVER_ERROR"
    assert result.error.message == "Bad Gateway"
    assert result.error.status == 502


def test_unknown_status_reason() -> None:
    assert normalize_response(599, None).error.message == "HTTP 599"


@pytest.mark.parametrize(
    ("status", "code"),
    [
        (400, ErrorCode.VALIDATION_ERROR),
        (401, ErrorCode.UNAUTHORIZED),
        (403, ErrorCode.FORBIDDEN),
        (404, ErrorCode.NOT_FOUND),
        (410, ErrorCode.NOT_FOUND),
        (422, ErrorCode.VALIDATION_ERROR),
        (409, ErrorCode.SERVER_ERROR),
        (500, ErrorCode.SERVER_ERROR),
    ],
)
def test_status_error_code(status: int, code: ErrorCode) -> None:
    assert status_error_code(status) == code


def test_auth_error_flag() -> None:
    assert normalize_response(401, None).is_auth_error
    assert normalize_response(403, {"error": "FORBIDDEN"}).is_auth_error
    assert not normalize_response(500, None).is_auth_error
