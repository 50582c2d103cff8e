"""Local cache store: TTL-validated response cache on key-value storage.

Entries never expire from storage by themselves. Validity is computed at
read time (now - written_at < TTL) and a stale entry is deleted by the
read that finds it, so an untouched stale entry can stay until read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from whiteboard.application.interfaces.storage import IKeyValueStorage
from whiteboard.core.constants import CACHE_STORAGE_PREFIX
from whiteboard.domain.entities.cache_entry import CacheEntry
from whiteboard.domain.exceptions import StorageException
from whiteboard.shared.utils.datetime import now_ms

logger = logging.getLogger(__name__)


class LocalCacheStore:
    """Cache of last known-good payloads, one global TTL.

    Args:
        storage: Key-value storage shared with the pending action queue.
        ttl_ms: Time-to-live in milliseconds applied to every key.
        clock: Returns the current time in epoch ms (injectable for tests).
    """

    def __init__(
        self,
        storage: IKeyValueStorage,
        ttl_ms: int,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")
        self.storage = storage
        self.ttl_ms = ttl_ms
        self.clock = clock

    @staticmethod
    def storage_key(key: str) -> str:
        """Storage key for a cache key (cache_<key>)."""
        return f"{CACHE_STORAGE_PREFIX}{key}"

    async def put(self, key: str, payload: Any) -> CacheEntry:
        """Store payload under key with the current time, overwriting any entry.

        Raises:
            StorageException: If the storage backend rejects the write.
        """
        entry = CacheEntry(key=key, payload=payload, written_at=self.clock())
        await self.storage.set(self.storage_key(key), entry.to_storage())
        logger.debug("Cache SET: %s", key)
        return entry

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Return the valid entry for key, or None.

        A stale entry is deleted as a side effect. Storage read failures
        are logged and reported as a miss.
        """
        try:
            raw = await self.storage.get(self.storage_key(key))
        except StorageException:
            logger.warning("Failed to load from cache: %s", key, exc_info=True)
            return None
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        entry = CacheEntry.from_storage(key, raw)
        if entry is not None and entry.is_valid(self.clock(), self.ttl_ms):
            logger.debug("Cache HIT: %s", key)
            return entry
        logger.debug("Cache STALE: %s", key)
        await self.invalidate(key)
        return None

    async def get(self, key: str) -> Any | None:
        """Return the cached payload for key, or None when absent or stale."""
        entry = await self.get_entry(key)
        return entry.payload if entry is not None else None

    async def invalidate(self, key: str) -> bool:
        """Remove the entry for key. Returns True if one existed."""
        try:
            deleted = await self.storage.delete(self.storage_key(key))
        except StorageException:
            logger.warning("Failed to invalidate cache key %s", key, exc_info=True)
            return False
        if deleted:
            logger.debug("Cache DELETE: %s", key)
        return deleted

    async def clear(self) -> int:
        """Remove every cache entry (e.g. on sign-out). Returns the count removed."""
        removed = 0
        for storage_key in await self.storage.keys(CACHE_STORAGE_PREFIX):
            if await self.storage.delete(storage_key):
                removed += 1
        if removed:
            logger.info("Cache CLEARED: %s entries", removed)
        return removed
