"""Domain entities.

Pure domain models; no storage or transport concerns.
"""

from whiteboard.domain.entities.cache_entry import CacheEntry
from whiteboard.domain.entities.pending_action import (
    FailedAction,
    PendingAction,
    ReplayAttempt,
)

__all__ = [
    "CacheEntry",
    "FailedAction",
    "PendingAction",
    "ReplayAttempt",
]
