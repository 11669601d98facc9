from __future__ import annotations

"""
Asynchronous Database Module

This module owns the connection to the identity directory database. A
`Database` object wraps an async SQLAlchemy engine and its session factory.
It is constructed explicitly at application startup (see
`src.core.lifecycle`), handed to whoever needs sessions, and disposed at
shutdown. Nothing in this module opens a connection at import time.

**Security Note**: Ensure that the database connection URL (DATABASE_URL) is
configured for SSL/TLS when connecting over untrusted networks. The URL is
never logged because it may carry credentials.

Key Components:
    - Database: engine + session factory with an explicit lifecycle.
    - Database.session: async context manager yielding an `AsyncSession`,
      rolled back on error.
    - Database.create_tables: creates the SQLModel tables, retried with
      exponential backoff while the server is unreachable.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import structlog
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

# Register the table models on SQLModel.metadata
import src.domain.entities  # noqa: F401

logger = structlog.get_logger(__name__)


class Database:
    """Explicitly managed handle on the identity directory database.

    Args:
        url: SQLAlchemy async URL, e.g. ``postgresql+asyncpg://...`` or
            ``sqlite+aiosqlite://`` for tests.
        echo: Log every SQL statement.
        **engine_kwargs: Passed through to `create_async_engine` (pool
            settings, ``poolclass`` for tests, ...).
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        self._engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            bind=self._engine, class_=AsyncSession, expire_on_commit=False
        )
        logger.debug("Database engine created", dialect=self._engine.dialect.name)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield an `AsyncSession`, rolling back if the body raises."""
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                logger.warning("Async database session rolled back due to error")
                raise

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )
    async def create_tables(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables created", tables=sorted(SQLModel.metadata.tables.keys()))

    async def check_health(self) -> bool:
        """Run ``SELECT 1``. Returns False instead of raising."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("Database engine disposed")
