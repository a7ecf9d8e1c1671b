"""Async database engine and session lifecycle management.

The engine and session factory are created lazily on first use and shared
for the lifetime of the process through ``_DatabaseManager``. Nothing here
touches the network at import time, so the application starts and serves
metrics and documentation even while the database is unreachable.
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from employee_api.core.config import get_settings
from employee_api.infrastructure.database.models import Employee

POOL_RECYCLE_SECONDS = 3600
COMMAND_TIMEOUT_SECONDS = 60


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine with connection pooling.

    Args:
        database_url: Optional database URL. If not provided, uses the
                     configured database URL from settings.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    db_config = get_settings().database_config
    url = database_url or db_config.database_url

    engine = create_async_engine(
        url,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=db_config.pool_pre_ping,
        echo=db_config.echo,
        pool_recycle=POOL_RECYCLE_SECONDS,
        connect_args={"command_timeout": COMMAND_TIMEOUT_SECONDS},
    )

    logger.info(
        "Created database engine - pool_size: {}, max_overflow: {}",
        db_config.pool_size,
        db_config.max_overflow,
    )

    return engine


class _DatabaseManager:
    """Holds the process-wide engine and session factory."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._async_session_factory is None:
            engine = self.get_engine()
            with self._lock:
                if self._async_session_factory is None:
                    self._async_session_factory = async_sessionmaker(
                        engine,
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
                    logger.info("Created async session factory")
        return self._async_session_factory

    async def close(self) -> None:
        """Dispose the engine and forget the session factory."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self.reset()

    def reset(self) -> None:
        """Reset the manager state. Used primarily for testing."""
        self._engine = None
        self._async_session_factory = None


_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    """Get or create the global async engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global async session factory."""
    return _db_manager.get_session_factory()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield a session that is committed on success and rolled back on error.

    Raises:
        Exception: Any exception raised while the session is in use is
            re-raised after rollback.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(Employee))
    """
    async_session_factory = get_session_factory()
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.debug("Database session rolled back due to error")
            raise


async def close_database() -> None:
    """Close the database engine; called on application shutdown."""
    await _db_manager.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """Check if the database answers a trivial query.

    Returns:
        tuple[bool, str | None]: ``(True, None)`` when healthy, otherwise
            ``(False, <error message>)``.
    """
    try:
        engine = get_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            _ = result.scalar()
    except (SQLAlchemyError, OSError) as e:
        return False, str(e)
    else:
        return True, None


async def init_database() -> None:
    """Create any missing tables for the registered models."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Employee.metadata.create_all)
    logger.info("Database schema is up to date")
