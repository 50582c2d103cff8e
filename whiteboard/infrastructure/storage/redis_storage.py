"""Redis-backed key-value storage.

Shares one Redis database between several sync agents (e.g. a kiosk
fleet) by namespacing keys with a prefix. Values are JSON strings with no
Redis-side expiry: cache validity is decided by the cache store at read
time and queued actions must never expire.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from whiteboard.domain.exceptions import StorageException

logger = logging.getLogger(__name__)

T = TypeVar("T")

_GLOB_SPECIAL = str.maketrans({c: f"\\{c}" for c in "*?[]\\"})


class RedisStorage:
    """Async Redis storage implementing IKeyValueStorage.

    Call connect() at startup and disconnect() at shutdown. A connection
    error triggers one reconnect and retry before StorageException.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str | None = None,
        key_prefix: str = "whiteboard",
        redis_client: redis.Redis | None = None,
    ) -> None:
        """Initialize redis storage.

        Args:
            host: Redis host.
            port: Redis port.
            db: Redis database number.
            password: Optional Redis password.
            key_prefix: Namespace prepended to every key.
            redis_client: Optional Redis client for testing or DI.
        """
        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.key_prefix = key_prefix
        self.redis = redis_client

    async def connect(self) -> None:
        """Establish Redis connection and verify it with PING."""
        if self.redis is None:
            self.redis = redis.Redis(
                host=self.host,
                port=self.port,
                db=self.db,
                password=self.password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
        try:
            await self.redis.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise StorageException("connect", None, str(e)) from e
        logger.info("Redis storage connected: %s:%s", self.host, self.port)

    async def disconnect(self) -> None:
        """Close Redis connection. Call on shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Redis storage disconnected")

    async def _reconnect(self) -> bool:
        """Drop the client and connect again. Returns True if reconnected."""
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except redis.RedisError:
                logger.debug("Ignoring error while closing stale Redis client")
        self.redis = None
        try:
            await self.connect()
        except StorageException:
            return False
        return True

    def _ns(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def _run(
        self, operation: str, key: str | None, call: Callable[[redis.Redis], Awaitable[T]]
    ) -> T:
        """Run call with one reconnect on connection errors."""
        if self.redis is None:
            raise StorageException(operation, key, "RedisStorage.connect() was not called")
        try:
            return await call(self.redis)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            if await self._reconnect() and self.redis is not None:
                try:
                    return await call(self.redis)
                except redis.RedisError as retry_error:
                    raise StorageException(operation, key, str(retry_error)) from retry_error
            logger.warning("Redis %s unavailable for key %s", operation, key)
            raise StorageException(operation, key, str(e)) from e
        except redis.RedisError as e:
            logger.exception("Redis %s error for key %s", operation, key)
            raise StorageException(operation, key, str(e)) from e

    async def get(self, key: str) -> Any:
        raw = await self._run("get", key, lambda r: r.get(self._ns(key)))
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any) -> None:
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageException("set", key, str(e)) from e
        await self._run("set", key, lambda r: r.set(self._ns(key), serialized))

    async def delete(self, key: str) -> bool:
        deleted = await self._run("delete", key, lambda r: r.delete(self._ns(key)))
        return bool(deleted)

    async def keys(self, prefix: str = "") -> list[str]:
        pattern = self._ns(prefix.translate(_GLOB_SPECIAL)) + "*"
        strip = len(self.key_prefix) + 1

        async def _scan(r: redis.Redis) -> list[str]:
            return [key[strip:] async for key in r.scan_iter(match=pattern)]

        return sorted(await self._run("keys", prefix, _scan))
