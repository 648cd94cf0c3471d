# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chat log of a session.

Holds user and assistant messages in arrival order. Plan acknowledgments
and combined plan documents are appended here so the transport can
deliver them after the request that started the plan has returned.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import ChatMessage
from src.models.chat import ChatMessageResponse, ChatRole


class ChatMessageLog:
    """Append-only message log of one session."""

    def __init__(self, db: AsyncSession, session_id: str) -> None:
        self._db = db
        self._session_id = session_id

    async def append(self, role: ChatRole, content: str) -> ChatMessageResponse:
        """Append a message and commit it."""
        message = ChatMessage(
            session_id=self._session_id,
            role=ChatRole(role).value,
            content=content,
        )
        self._db.add(message)
        await self._db.commit()
        await self._db.refresh(message)
        return ChatMessageResponse.model_validate(message)

    async def recent(self, limit: int = 20) -> list[ChatMessageResponse]:
        """Get the latest messages, oldest first."""
        result = await self._db.execute(
            select(ChatMessage)
            .where(ChatMessage.session_id == self._session_id)
            .order_by(ChatMessage.id.desc())
            .limit(limit)
        )
        messages = list(result.scalars().all())
        messages.reverse()
        return [ChatMessageResponse.model_validate(m) for m in messages]

    async def last_assistant_message(self) -> Optional[str]:
        """Get the content of the latest assistant message, if any."""
        result = await self._db.execute(
            select(ChatMessage.content)
            .where(
                ChatMessage.session_id == self._session_id,
                ChatMessage.role == ChatRole.ASSISTANT.value,
            )
            .order_by(ChatMessage.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
