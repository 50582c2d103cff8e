"""Typed calls for the Whiteboard backend resources.

Thin layer over the request gateway: each call picks the resource path and
its cache slot. Reads are cached; mutations invalidate the slot they
touch, so the next read goes to the network.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any
from urllib.parse import quote, urlencode

from whiteboard.application.services.request_gateway import RequestGateway
from whiteboard.domain.enums import ErrorCode, HttpMethod
from whiteboard.domain.value_objects.core import ApiResponse
from whiteboard.infrastructure.cache.keys import (
    announcements_key,
    assignment_key,
    assignments_key,
    course_key,
    courses_key,
    events_key,
    messages_key,
    user_key,
    users_key,
)


def build_query_string(params: dict[str, Any] | None) -> str:
    """Encode query parameters, skipping None values.

    Returns:
        "?a=1&b=2", or "" when nothing is left to encode.
    """
    if not params:
        return ""
    pairs = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        pairs.append((key, value))
    return f"?{urlencode(pairs)}" if pairs else ""


def _missing(name: str) -> ApiResponse:
    return ApiResponse.fail(ErrorCode.VALIDATION_ERROR, f"{name} is required")


def _validated_id(
    func: Callable[..., Awaitable[ApiResponse]],
) -> Callable[..., Awaitable[ApiResponse]]:
    """Turn a rejected cache key component (ValueError) into a VALIDATION_ERROR result."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> ApiResponse:
        try:
            return await func(*args, **kwargs)
        except ValueError as e:
            return ApiResponse.fail(ErrorCode.VALIDATION_ERROR, str(e))

    return wrapper


class WhiteboardClient:
    """Courses, assignments, messages, announcements, users and events."""

    def __init__(self, gateway: RequestGateway) -> None:
        self.gateway = gateway

    async def _get(self, path: str, cache_key: str) -> ApiResponse:
        return await self.gateway.request(HttpMethod.GET, path, cache_key=cache_key)

    # Courses

    async def get_courses(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self._get(f"courses{build_query_string(params)}", courses_key(params))

    @_validated_id
    async def get_course_by_id(self, course_id: str) -> ApiResponse:
        if not course_id:
            return _missing("course_id")
        return await self._get(f"courses/{quote(course_id, safe='')}", course_key(course_id))

    async def create_course(self, data: dict[str, Any]) -> ApiResponse:
        return await self.gateway.request(
            HttpMethod.POST, "courses", data, cache_key=courses_key()
        )

    @_validated_id
    async def update_course(self, course_id: str, data: dict[str, Any]) -> ApiResponse:
        if not course_id:
            return _missing("course_id")
        return await self.gateway.request(
            HttpMethod.PATCH,
            f"courses/{quote(course_id, safe='')}",
            data,
            cache_key=course_key(course_id),
        )

    @_validated_id
    async def delete_course(self, course_id: str) -> ApiResponse:
        if not course_id:
            return _missing("course_id")
        return await self.gateway.request(
            HttpMethod.DELETE,
            f"courses/{quote(course_id, safe='')}",
            cache_key=course_key(course_id),
        )

    @_validated_id
    async def enroll_in_course(self, course_id: str) -> ApiResponse:
        """Enroll the current user; queued when offline."""
        if not course_id:
            return _missing("course_id")
        return await self.gateway.request(
            HttpMethod.POST,
            f"courses/{quote(course_id, safe='')}/enroll",
            cache_key=course_key(course_id),
        )

    # Assignments

    async def get_assignments(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self._get(
            f"assignments{build_query_string(params)}", assignments_key(params)
        )

    @_validated_id
    async def get_assignment_by_id(self, assignment_id: str) -> ApiResponse:
        if not assignment_id:
            return _missing("assignment_id")
        return await self._get(
            f"assignments/{quote(assignment_id, safe='')}", assignment_key(assignment_id)
        )

    @_validated_id
    async def submit_assignment(
        self, assignment_id: str, submission: dict[str, Any]
    ) -> ApiResponse:
        if not assignment_id:
            return _missing("assignment_id")
        return await self.gateway.request(
            HttpMethod.POST,
            f"assignments/{quote(assignment_id, safe='')}/submit",
            submission,
            cache_key=assignment_key(assignment_id),
        )

    # Messages and announcements

    async def get_messages(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self._get(f"messages{build_query_string(params)}", messages_key(params))

    async def send_message(self, data: dict[str, Any]) -> ApiResponse:
        return await self.gateway.request(
            HttpMethod.POST, "messages", data, cache_key=messages_key()
        )

    async def get_announcements(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self._get(
            f"announcements{build_query_string(params)}", announcements_key(params)
        )

    # Users and events

    async def get_users(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self._get(f"users{build_query_string(params)}", users_key(params))

    @_validated_id
    async def get_user_by_id(self, user_id: str) -> ApiResponse:
        if not user_id:
            return _missing("user_id")
        return await self._get(f"users/{quote(user_id, safe='')}", user_key(user_id))

    async def get_events(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self._get(f"events{build_query_string(params)}", events_key(params))
