"""Key-value storage backends for cache entries and the pending action queue."""

from whiteboard.infrastructure.storage.factory import StorageBackend, StorageFactory
from whiteboard.infrastructure.storage.memory_storage import MemoryStorage
from whiteboard.infrastructure.storage.redis_storage import RedisStorage
from whiteboard.infrastructure.storage.sql_storage import SqlStorage

__all__ = [
    "MemoryStorage",
    "RedisStorage",
    "SqlStorage",
    "StorageBackend",
    "StorageFactory",
]
