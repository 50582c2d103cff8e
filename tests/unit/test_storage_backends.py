"""Key-value storage backends: memory, SQL (SQLite file) and Redis (mocked client)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from whiteboard.core.config import Settings
from whiteboard.domain.exceptions import StorageException
from whiteboard.infrastructure.storage import (
    MemoryStorage,
    RedisStorage,
    SqlStorage,
    StorageFactory,
)


@pytest.fixture
async def sql_storage(tmp_path):
    storage = SqlStorage(f"sqlite+aiosqlite:///{tmp_path / 'offline.db'}")
    await storage.connect()
    yield storage
    await storage.disconnect()


@pytest.fixture(params=["memory", "sql"])
async def kv(request, sql_storage):
    if request.param == "memory":
        return MemoryStorage()
    return sql_storage


async def test_set_get_delete(kv) -> None:
    assert await kv.get("missing") is None
    await kv.set("cache_courses", {"data": [1], "_cachedAt": 5})
    assert await kv.get("cache_courses") == {"data": [1], "_cachedAt": 5}
    assert await kv.delete("cache_courses") is True
    assert await kv.delete("cache_courses") is False


async def test_set_overwrites(kv) -> None:
    await kv.set("accessToken", "a")
    await kv.set("accessToken", "b")
    assert await kv.get("accessToken") == "b"


async def test_keys_by_prefix(kv) -> None:
    await kv.set("cache_a", 1)
    await kv.set("cache_b", 2)
    await kv.set("pendingOfflineActions", [])
    assert sorted(await kv.keys("cache_")) == ["cache_a", "cache_b"]


async def test_keys_prefix_is_literal(kv) -> None:
    """LIKE/glob wildcards in the prefix are not treated as patterns."""
    await kv.set("cache_x", 1)
    await kv.set("cacheYx", 2)
    assert await kv.keys("cache_") == ["cache_x"]


async def test_unserializable_value_raises(kv) -> None:
    with pytest.raises(StorageException):
        await kv.set("k", {1, 2})


async def test_sql_storage_persists_across_connections(tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'persist.db'}"
    first = SqlStorage(url)
    await first.connect()
    await first.set("pendingOfflineActions", [{"id": "action_1_abc"}])
    await first.disconnect()

    second = SqlStorage(url)
    await second.connect()
    assert await second.get("pendingOfflineActions") == [{"id": "action_1_abc"}]
    await second.disconnect()


async def test_sql_storage_requires_connect() -> None:
    with pytest.raises(StorageException):
        await SqlStorage("sqlite+aiosqlite:///unused.db").get("k")


@pytest.fixture
def redis_client() -> AsyncMock:
    client = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    return client


async def test_redis_namespaces_and_serializes(redis_client: AsyncMock) -> None:
    storage = RedisStorage(key_prefix="wb", redis_client=redis_client)
    await storage.connect()
    await storage.set("cache_courses", {"data": [1]})
    redis_client.set.assert_awaited_once_with("wb:cache_courses", '{"data": [1]}')

    redis_client.get = AsyncMock(return_value='{"data": [1]}')
    assert await storage.get("cache_courses") == {"data": [1]}
    redis_client.get.assert_awaited_once_with("wb:cache_courses")

    redis_client.delete = AsyncMock(return_value=1)
    assert await storage.delete("cache_courses") is True


async def test_redis_keys_strip_namespace(redis_client: AsyncMock) -> None:
    async def scan_iter(match: str):
        assert match == "wb:cache_*"
        for key in ("wb:cache_b", "wb:cache_a"):
            yield key

    redis_client.scan_iter = MagicMock(side_effect=scan_iter)
    storage = RedisStorage(key_prefix="wb", redis_client=redis_client)
    assert await storage.keys("cache_") == ["cache_a", "cache_b"]


async def test_redis_error_becomes_storage_exception(redis_client: AsyncMock) -> None:
    redis_client.get = AsyncMock(side_effect=redis.ResponseError("WRONGTYPE"))
    storage = RedisStorage(redis_client=redis_client)
    with pytest.raises(StorageException) as exc_info:
        await storage.get("k")
    assert exc_info.value.details["operation"] == "get"


async def test_redis_requires_connect() -> None:
    with pytest.raises(StorageException):
        await RedisStorage().get("k")


def test_factory_creates_configured_backend() -> None:
    assert isinstance(
        StorageFactory.create_storage(Settings(storage_backend="memory")), MemoryStorage
    )
    assert isinstance(
        StorageFactory.create_storage(
            Settings(storage_backend="sql", database_url="sqlite+aiosqlite:///x.db")
        ),
        SqlStorage,
    )
    assert isinstance(StorageFactory.create_storage(Settings(storage_backend="redis")), RedisStorage)
