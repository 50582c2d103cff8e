"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Used by the sql storage backend. The default URL is a local SQLite file
(aiosqlite driver) so cache entries and queued actions survive restarts;
any async SQLAlchemy URL works. Tables are created on connect; there is
no migration history for this single key-value table.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def create_engine_and_sessionmaker(
    database_url: str, echo: bool = False
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async engine and its session factory.

    Args:
        database_url: Async SQLAlchemy URL (e.g. sqlite+aiosqlite:///./offline.db).
        echo: Log SQL statements.

    Returns:
        (engine, session factory) pair; the caller owns disposal.
    """
    connect_args: dict[str, Any] = {}
    engine_kwargs: dict[str, Any] = {"echo": echo}
    if database_url.startswith("sqlite"):
        # One connection shared across tasks of the event loop.
        connect_args["check_same_thread"] = False
    else:
        engine_kwargs["pool_pre_ping"] = True
    engine = create_async_engine(database_url, connect_args=connect_args, **engine_kwargs)
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine, session_factory


async def create_tables(engine: AsyncEngine) -> None:
    """Create all mapped tables if they do not exist."""
    # Import models so they register on Base.metadata.
    from whiteboard.infrastructure.persistence import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug("Storage tables ensured")
