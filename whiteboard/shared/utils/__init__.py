"""Shared utilities: clock and id generators."""

from whiteboard.shared.utils.datetime import now_ms
from whiteboard.shared.utils.generators import generate_action_id, generate_cuid

__all__ = [
    "generate_action_id",
    "generate_cuid",
    "now_ms",
]
