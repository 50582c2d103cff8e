"""ID generators (CUID2 based)."""

from cuid2 import cuid_wrapper

from whiteboard.core.constants import ACTION_ID_PREFIX, ACTION_ID_SUFFIX_LENGTH

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_action_id(timestamp_ms: int) -> str:
    """Generate a pending action id: action_<ms>_<random suffix>.

    The random suffix keeps ids unique when several actions are queued
    within the same millisecond.

    Args:
        timestamp_ms: Enqueue time in epoch milliseconds.

    Returns:
        Action id string.
    """
    suffix = generate_cuid()[:ACTION_ID_SUFFIX_LENGTH]
    return f"{ACTION_ID_PREFIX}_{timestamp_ms}_{suffix}"
