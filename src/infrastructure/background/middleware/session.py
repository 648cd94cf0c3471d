# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session context middleware for plan continuations.

Every plan continuation carries the session id as its first argument.
The middleware makes it available to the running task and binds it into
the structlog context so every log line of the continuation carries it.
"""

import contextvars
import logging
from typing import Any

import dramatiq
from dramatiq import Message, Middleware

from src.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)


_session_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)


def get_current_session() -> str | None:
    """Get the session id of the running task, if any."""
    return _session_context.get()


def set_current_session(session_id: str | None) -> contextvars.Token[str | None]:
    """Set the session id of the running task.

    Returns:
        Context token for resetting.
    """
    return _session_context.set(session_id)


class SessionContextMiddleware(Middleware):
    """Restores session context around message processing.

    The session id is read from the "session_id" message option, or from
    the first positional argument of the message.
    """

    SESSION_KEY = "session_id"

    def before_enqueue(
        self,
        broker: dramatiq.Broker,
        message: Message,
        delay: int | None,
    ) -> None:
        """Record the session id in the message options."""
        if self.SESSION_KEY in message.options:
            return

        session_id = get_current_session()
        if session_id is None and message.args:
            session_id = str(message.args[0])
        if session_id:
            message.options[self.SESSION_KEY] = session_id

    def before_process_message(
        self,
        broker: dramatiq.Broker,
        message: Message,
    ) -> None:
        """Bind the session id before the actor runs."""
        session_id = message.options.get(self.SESSION_KEY)
        if session_id:
            set_current_session(session_id)
            bind_context(session_id=session_id, message_id=message.message_id)
            logger.debug(
                "Restored session context: %s (message: %s)",
                session_id,
                message.message_id,
            )

    def after_process_message(
        self,
        broker: dramatiq.Broker,
        message: Message,
        *,
        result: Any = None,
        exception: BaseException | None = None,
    ) -> None:
        """Clear the session context after processing."""
        set_current_session(None)
        clear_context()

    def after_skip_message(
        self,
        broker: dramatiq.Broker,
        message: Message,
    ) -> None:
        """Clear the session context after a skipped message."""
        set_current_session(None)
        clear_context()
