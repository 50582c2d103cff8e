"""Storage interfaces (ports) for the application layer.

The cache store, the pending action queue and the storage token provider
only depend on this protocol; backends live in
whiteboard.infrastructure.storage.
"""

from typing import Any, Protocol


class IKeyValueStorage(Protocol):
    """Protocol for durable key-value storage of JSON-serializable values."""

    async def get(self, key: str) -> Any:
        """Return the stored value or None if missing."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store value under key, overwriting unconditionally."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""
        ...

    async def keys(self, prefix: str = "") -> list[str]:
        """Return all keys starting with prefix."""
        ...
