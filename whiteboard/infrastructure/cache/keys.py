"""Cache key builders. Single place for key format (DRY).

Key components (course_id, user_id, etc.) must not contain CACHE_KEY_SEP
to avoid ambiguous or colliding keys. List keys carry their query
parameters, so each filtered list gets its own slot.
"""

from typing import Any
from urllib.parse import urlencode

from whiteboard.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_ANNOUNCEMENTS,
    CACHE_PREFIX_ASSIGNMENT,
    CACHE_PREFIX_ASSIGNMENTS,
    CACHE_PREFIX_COURSE,
    CACHE_PREFIX_COURSES,
    CACHE_PREFIX_EVENTS,
    CACHE_PREFIX_MESSAGES,
    CACHE_PREFIX_USER,
    CACHE_PREFIX_USERS,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP.
    """
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def canonical_query(params: dict[str, Any] | None) -> str:
    """Sorted, None-skipped query for a list key; "" when nothing is left.

    The separator is percent-encoded so the result is a valid key component.
    """
    if not params:
        return ""
    pairs = []
    for name in sorted(params, key=str):
        value = params[name]
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        pairs.append((str(name), value))
    if not pairs:
        return ""
    query = urlencode(pairs).replace(CACHE_KEY_SEP, "%5F")
    _validate_key_component(query, "params")
    return query


def _list_key(prefix: str, params: dict[str, Any] | None) -> str:
    query = canonical_query(params)
    return f"{prefix}{CACHE_KEY_SEP}{query}" if query else prefix


def courses_key(params: dict[str, Any] | None = None) -> str:
    """Cache key for the course list."""
    return _list_key(CACHE_PREFIX_COURSES, params)


def course_key(course_id: str) -> str:
    """Cache key for one course by ID."""
    _validate_key_component(course_id, "course_id")
    return f"{CACHE_PREFIX_COURSE}{CACHE_KEY_SEP}{course_id}"


def assignments_key(params: dict[str, Any] | None = None) -> str:
    """Cache key for the assignment list."""
    return _list_key(CACHE_PREFIX_ASSIGNMENTS, params)


def assignment_key(assignment_id: str) -> str:
    """Cache key for one assignment by ID."""
    _validate_key_component(assignment_id, "assignment_id")
    return f"{CACHE_PREFIX_ASSIGNMENT}{CACHE_KEY_SEP}{assignment_id}"


def messages_key(params: dict[str, Any] | None = None) -> str:
    return _list_key(CACHE_PREFIX_MESSAGES, params)


def announcements_key(params: dict[str, Any] | None = None) -> str:
    return _list_key(CACHE_PREFIX_ANNOUNCEMENTS, params)


def users_key(params: dict[str, Any] | None = None) -> str:
    return _list_key(CACHE_PREFIX_USERS, params)


def user_key(user_id: str) -> str:
    """Cache key for one user by ID."""
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_USER}{CACHE_KEY_SEP}{user_id}"


def events_key(params: dict[str, Any] | None = None) -> str:
    """Cache key for calendar events."""
    return _list_key(CACHE_PREFIX_EVENTS, params)
