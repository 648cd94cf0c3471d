# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base utilities for Dramatiq tasks.

Dramatiq workers run several threads, and SQLAlchemy async engines and
asyncpg connections are bound to the event loop that created them. Each
worker thread therefore keeps one persistent event loop, and every task
of that thread runs on it. When a thread's loop is replaced, its cached
database engine is forgotten so it is rebuilt on the new loop.
"""

import asyncio
import logging
import threading
from typing import Any, Coroutine, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_thread_local = threading.local()


def _get_thread_event_loop() -> asyncio.AbstractEventLoop:
    """Get or create the persistent event loop of the current thread."""
    loop = getattr(_thread_local, "event_loop", None)

    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        _thread_local.event_loop = loop

        # Import here to avoid circular imports
        from src.infrastructure.database.connection import _clear_thread_db_connections

        _clear_thread_db_connections()

        logger.debug(
            "Created new event loop for thread %s",
            threading.current_thread().name,
        )

    return loop


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine from a sync Dramatiq actor.

    Args:
        coro: Coroutine to run.

    Returns:
        Result of the coroutine.

    Example:
        @dramatiq.actor
        def my_task(session_id: str):
            async def _process():
                async with get_worker_db_manager().get_session() as session:
                    ...
            return run_async(_process())
    """
    loop = _get_thread_event_loop()
    return loop.run_until_complete(coro)
