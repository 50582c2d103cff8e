"""Storage factory: creates the memory, sql or redis backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from whiteboard.infrastructure.storage.memory_storage import MemoryStorage
from whiteboard.infrastructure.storage.redis_storage import RedisStorage
from whiteboard.infrastructure.storage.sql_storage import SqlStorage

if TYPE_CHECKING:
    from whiteboard.core.config import Settings

StorageBackend = MemoryStorage | SqlStorage | RedisStorage


class StorageFactory:
    """Factory for key-value storage instances based on configuration."""

    @staticmethod
    def create_storage(settings: "Settings | None" = None) -> StorageBackend:
        """Create storage from settings (not yet connected).

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            MemoryStorage, SqlStorage or RedisStorage.

        Raises:
            ValueError: Unknown backend.
        """
        from whiteboard.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()

        if backend == "memory":
            return MemoryStorage()
        if backend == "sql":
            return SqlStorage(database_url=s.database_url, echo=s.database_echo)
        if backend == "redis":
            return RedisStorage(
                host=s.redis_host,
                port=s.redis_port,
                db=s.redis_db,
                password=s.redis_password.get_secret_value() if s.redis_password else None,
                key_prefix=s.redis_key_prefix,
            )
        raise ValueError(
            f"Unknown storage backend: {backend}. Supported: 'memory', 'sql', 'redis'"
        )
