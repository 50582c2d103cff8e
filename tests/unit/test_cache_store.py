"""LocalCacheStore: round trip, lazy TTL eviction, invalidation and clear."""

from unittest.mock import AsyncMock

import pytest

from tests.fakes import TTL_MS, FakeClock
from whiteboard.application.services import LocalCacheStore
from whiteboard.core.constants import PENDING_ACTIONS_KEY
from whiteboard.domain.exceptions import StorageException
from whiteboard.infrastructure.storage import MemoryStorage


async def test_put_then_get_returns_payload(cache_store: LocalCacheStore) -> None:
    await cache_store.put("courses", [{"id": "c1"}])
    assert await cache_store.get("courses") == [{"id": "c1"}]


async def test_entry_is_stored_in_browser_format(
    cache_store: LocalCacheStore, storage: MemoryStorage, clock: FakeClock
) -> None:
    """Stored under cache_<key> as {data, _cachedAt}."""
    await cache_store.put("course_1", {"title": "Algebra"})
    raw = await storage.get("cache_course_1")
    assert raw == {"data": {"title": "Algebra"}, "_cachedAt": clock.now}


async def test_entry_valid_just_before_ttl(
    cache_store: LocalCacheStore, clock: FakeClock
) -> None:
    await cache_store.put("courses", [1])
    clock.advance(TTL_MS - 1)
    assert await cache_store.get("courses") == [1]


async def test_expired_entry_is_a_miss_and_deleted(
    cache_store: LocalCacheStore, storage: MemoryStorage, clock: FakeClock
) -> None:
    """Reading a stale entry reports absent and removes it from storage."""
    await cache_store.put("courses", [1])
    clock.advance(TTL_MS)
    assert await cache_store.get("courses") is None
    assert await storage.get("cache_courses") is None


async def test_stale_entry_stays_until_read(
    cache_store: LocalCacheStore, storage: MemoryStorage, clock: FakeClock
) -> None:
    await cache_store.put("courses", [1])
    clock.advance(TTL_MS * 2)
    assert await storage.get("cache_courses") is not None


async def test_malformed_entry_is_a_miss(
    cache_store: LocalCacheStore, storage: MemoryStorage
) -> None:
    await storage.set("cache_courses", "not-an-entry")
    assert await cache_store.get("courses") is None
    assert await storage.get("cache_courses") is None


async def test_put_overwrites_and_refreshes_timestamp(
    cache_store: LocalCacheStore, clock: FakeClock
) -> None:
    await cache_store.put("courses", [1])
    clock.advance(TTL_MS - 10)
    await cache_store.put("courses", [2])
    clock.advance(20)
    assert await cache_store.get("courses") == [2]


async def test_invalidate(cache_store: LocalCacheStore) -> None:
    await cache_store.put("courses", [1])
    assert await cache_store.invalidate("courses") is True
    assert await cache_store.invalidate("courses") is False
    assert await cache_store.get("courses") is None


async def test_clear_removes_only_cache_entries(
    cache_store: LocalCacheStore, storage: MemoryStorage
) -> None:
    await cache_store.put("courses", [1])
    await cache_store.put("events", [2])
    await storage.set(PENDING_ACTIONS_KEY, [])
    assert await cache_store.clear() == 2
    assert await storage.keys("cache_") == []
    assert await storage.get(PENDING_ACTIONS_KEY) == []


async def test_storage_read_failure_is_a_miss() -> None:
    storage = AsyncMock()
    storage.get = AsyncMock(side_effect=StorageException("get", "cache_courses", "boom"))
    cache = LocalCacheStore(storage, ttl_ms=TTL_MS)
    assert await cache.get("courses") is None


async def test_put_propagates_storage_failure(cache_store: LocalCacheStore) -> None:
    with pytest.raises(StorageException):
        await cache_store.put("courses", {"not": object()})


def test_ttl_must_be_positive(storage: MemoryStorage) -> None:
    with pytest.raises(ValueError):
        LocalCacheStore(storage, ttl_ms=0)
