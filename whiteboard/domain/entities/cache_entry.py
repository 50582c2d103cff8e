"""Cache entry domain entity.

A cached response body plus the time it was written. Validity is computed
lazily against a TTL at read time; entries never expire on their own.
"""

from dataclasses import dataclass
from typing import Any

from whiteboard.domain.exceptions import ValidationException


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry: last known-good payload for a cache key.

    Stored as {"data": payload, "_cachedAt": written_at} so entries written
    by the browser client stay readable.
    """

    key: str
    payload: Any
    written_at: int

    def __post_init__(self) -> None:
        if not self.key:
            raise ValidationException("Cache key is required", field="key")

    def is_valid(self, now_ms: int, ttl_ms: int) -> bool:
        """Return True while the entry is younger than the TTL.

        Args:
            now_ms: Current time in epoch milliseconds.
            ttl_ms: Time-to-live in milliseconds.
        """
        return (now_ms - self.written_at) < ttl_ms

    def to_storage(self) -> dict[str, Any]:
        """Serialize for the key-value storage."""
        return {"data": self.payload, "_cachedAt": self.written_at}

    @classmethod
    def from_storage(cls, key: str, raw: Any) -> "CacheEntry | None":
        """Build from a stored document; None if it is not a cache entry."""
        if not isinstance(raw, dict) or "_cachedAt" not in raw:
            return None
        try:
            written_at = int(raw["_cachedAt"])
        except (TypeError, ValueError):
            return None
        return cls(key=key, payload=raw.get("data"), written_at=written_at)
