# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

StudyPilot keeps learner state (profile, knowledge, quiz ledger, study
sessions), plan state and the chat log in one PostgreSQL database. Every
row is scoped by session_id.

Uses SQLAlchemy 2.0 async API with asyncpg driver.

Example:
    from src.infrastructure.database.connection import (
        init_database,
        get_database_manager,
    )

    # Initialize at application startup
    await init_database(settings)

    async with get_database_manager().get_session() as session:
        result = await session.execute(select(KnowledgeEntry))
        entries = result.scalars().all()
"""

import threading
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncContextManager, AsyncIterator, Callable, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Opens one session per unit of work, e.g. DatabaseManager.get_session
SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]

if TYPE_CHECKING:
    from src.core.config.settings import Settings


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class DatabaseManager:
    """Lazily creates and caches the async engine and sessionmaker.

    The engine is created on first use so that a manager built in one
    thread binds to the event loop of the thread that actually uses it.

    Attributes:
        url: Database URL the engine connects to.

    Example:
        manager = DatabaseManager(settings)
        async with manager.get_session() as session:
            await session.execute(...)
    """

    def __init__(self, settings: "Settings", url: Optional[str] = None) -> None:
        """Initialize the database manager.

        Args:
            settings: Application settings containing database configuration.
            url: Override for settings.database.url.
        """
        self._settings = settings
        self.url = url or settings.database.url
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    def _get_or_create_engine(self) -> AsyncEngine:
        if self._engine is None:
            db = self._settings.database
            self._engine = create_async_engine(
                self.url,
                pool_size=db.pool_size,
                max_overflow=db.max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
                echo=False,
            )
        return self._engine

    def _get_or_create_sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(
                bind=self._get_or_create_engine(),
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._sessionmaker

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine, creating it on first access."""
        return self._get_or_create_engine()

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """Get an async session.

        The session is committed on success and rolled back on exception.

        Yields:
            AsyncSession for database operations.

        Raises:
            DatabaseError: If a database operation fails.
        """
        sessionmaker = self._get_or_create_sessionmaker()

        async with sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables known to the declarative Base.

        Raises:
            DatabaseError: If table creation fails.
        """
        from src.infrastructure.database.models import Base

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to create tables", e) from e

    async def check_connection(self) -> bool:
        """Check if the database is reachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def forget_connections(self) -> None:
        """Drop the cached engine without disposing it.

        Used when the owning event loop has been replaced; the next access
        builds a new engine bound to the current loop.
        """
        self._engine = None
        self._sessionmaker = None

    async def close(self) -> None:
        """Dispose the engine and its pool."""
        if self._engine is not None:
            await self._engine.dispose()
        self.forget_connections()


# =============================================================================
# APPLICATION MANAGER
# =============================================================================

_database_manager: Optional[DatabaseManager] = None


async def init_database(settings: "Settings", create_tables: bool = False) -> DatabaseManager:
    """Initialize the application-wide database manager.

    Args:
        settings: Application settings containing database configuration.
        create_tables: Create missing tables after connecting.

    Returns:
        The initialized manager.

    Raises:
        DatabaseError: If table creation fails.
    """
    global _database_manager

    _database_manager = DatabaseManager(settings)
    if create_tables:
        await _database_manager.create_all()
    return _database_manager


def get_database_manager() -> DatabaseManager:
    """Get the application-wide database manager.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _database_manager is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _database_manager


async def close_database() -> None:
    """Close the application-wide database manager."""
    global _database_manager

    if _database_manager is not None:
        await _database_manager.close()
        _database_manager = None


# =============================================================================
# WORKER THREAD-LOCAL MANAGER
# =============================================================================

# Each Dramatiq worker thread gets its own manager instance
_thread_local_manager = threading.local()


def get_worker_db_manager() -> DatabaseManager:
    """Get the DatabaseManager for the current worker thread.

    SQLAlchemy async engines are bound to the event loop they are created
    in, and every Dramatiq worker thread runs its own persistent loop (see
    tasks/base.py), so engines are never shared across threads.

    Returns:
        Thread-local DatabaseManager instance.
    """
    manager = getattr(_thread_local_manager, "db_manager", None)

    if manager is None:
        from src.core.config import get_settings

        manager = DatabaseManager(get_settings())
        _thread_local_manager.db_manager = manager

    return manager


def _clear_thread_db_connections() -> None:
    """Clear database connections for the current thread.

    Called by run_async() when a new event loop is created for a thread.
    Safe to call even if no manager exists for the thread.
    """
    manager = getattr(_thread_local_manager, "db_manager", None)
    if manager is not None:
        manager.forget_connections()


def reset_worker_db_manager() -> None:
    """Reset the worker DB manager for the current thread. Used in tests."""
    manager = getattr(_thread_local_manager, "db_manager", None)
    if manager is not None:
        manager.forget_connections()
        _thread_local_manager.db_manager = None
