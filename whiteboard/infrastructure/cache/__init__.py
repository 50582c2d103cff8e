"""Cache key utilities for backend resources.

The cache itself is whiteboard.application.services.cache_store; this
package only owns the key format (keys.py).
"""

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

__all__ = [
    "announcements_key",
    "assignment_key",
    "assignments_key",
    "course_key",
    "courses_key",
    "events_key",
    "messages_key",
    "user_key",
    "users_key",
]
