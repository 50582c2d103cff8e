"""Epoch-millisecond clock.

Cache entries and pending actions carry epoch-millisecond timestamps
(the format the browser client persisted). Services take a clock
callable defaulting to now_ms; tests inject their own.
"""

from datetime import UTC, datetime


def now_ms() -> int:
    """Return the current UTC time as milliseconds since the Unix epoch."""
    return int(datetime.now(UTC).timestamp() * 1000)
