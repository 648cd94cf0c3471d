# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PostgreSQL connections.

Example:
    from src.infrastructure.database import init_database, get_database_manager

    await init_database(settings)
    async with get_database_manager().get_session() as session:
        result = await session.execute(select(KnowledgeEntry))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    DatabaseManager,
    SessionFactory,
    _clear_thread_db_connections,
    close_database,
    get_database_manager,
    get_worker_db_manager,
    init_database,
    reset_worker_db_manager,
)

__all__ = [
    "DatabaseError",
    "DatabaseManager",
    "SessionFactory",
    "init_database",
    "get_database_manager",
    "close_database",
    # Worker thread-local manager
    "get_worker_db_manager",
    "reset_worker_db_manager",
    "_clear_thread_db_connections",
]
