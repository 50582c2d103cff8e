"""SQLAlchemy-backed key-value storage (SQLite by default).

Durable counterpart of the browser's localStorage: cache entries and the
pending action queue survive restarts of the sync agent.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from whiteboard.domain.exceptions import StorageException
from whiteboard.infrastructure.persistence.database import (
    create_engine_and_sessionmaker,
    create_tables,
)
from whiteboard.infrastructure.persistence.models import KeyValueEntry

logger = logging.getLogger(__name__)


class SqlStorage:
    """Key-value storage on one kv_entries table.

    Call connect() at startup (creates the engine and table) and
    disconnect() at shutdown.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """Initialize sql storage.

        Args:
            database_url: Async SQLAlchemy URL.
            echo: Log SQL statements.
        """
        self.database_url = database_url
        self.echo = echo
        self.engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    async def connect(self) -> None:
        """Create engine and ensure the table exists. Idempotent."""
        if self._sessions is not None:
            return
        self.engine, self._sessions = create_engine_and_sessionmaker(
            self.database_url, echo=self.echo
        )
        try:
            await create_tables(self.engine)
        except SQLAlchemyError as e:
            await self.disconnect()
            raise StorageException("connect", None, str(e)) from e
        logger.info("SQL storage connected")

    async def disconnect(self) -> None:
        """Dispose the engine. Call on shutdown."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("SQL storage disconnected")
        self.engine = None
        self._sessions = None

    def _session(self) -> AsyncSession:
        if self._sessions is None:
            raise StorageException("session", None, "SqlStorage.connect() was not called")
        return self._sessions()

    async def get(self, key: str) -> Any:
        try:
            async with self._session() as session:
                entry = await session.get(KeyValueEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            logger.exception("Storage get error for key %s", key)
            raise StorageException("get", key, str(e)) from e

    async def set(self, key: str, value: Any) -> None:
        try:
            async with self._session() as session:
                async with session.begin():
                    await session.merge(KeyValueEntry(key=key, value=value))
        except (SQLAlchemyError, TypeError, ValueError) as e:
            logger.exception("Storage set error for key %s", key)
            raise StorageException("set", key, str(e)) from e

    async def delete(self, key: str) -> bool:
        try:
            async with self._session() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(KeyValueEntry).where(KeyValueEntry.key == key)
                    )
                return bool(result.rowcount)
        except SQLAlchemyError as e:
            logger.exception("Storage delete error for key %s", key)
            raise StorageException("delete", key, str(e)) from e

    async def keys(self, prefix: str = "") -> list[str]:
        stmt = select(KeyValueEntry.key).order_by(KeyValueEntry.key)
        if prefix:
            stmt = stmt.where(KeyValueEntry.key.startswith(prefix, autoescape=True))
        try:
            async with self._session() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.exception("Storage keys error for prefix %s", prefix)
            raise StorageException("keys", prefix, str(e)) from e
