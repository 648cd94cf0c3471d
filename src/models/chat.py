# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chat schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Intent(str, Enum):
    """How an incoming message is routed."""

    CONVERSATIONAL = "CONVERSATIONAL"
    LEARNING = "LEARNING"


class ChatRole(str, Enum):
    """Author of a chat log message."""

    USER = "user"
    ASSISTANT = "assistant"


class ReplyKind(str, Enum):
    """Shape of the reply to an incoming message.

    STREAM: a live single-turn reply.
    ACKNOWLEDGMENT: a plan was started; the combined document is appended
        to the chat log later.
    BUSY: a plan is still running for the session.
    """

    STREAM = "stream"
    ACKNOWLEDGMENT = "acknowledgment"
    BUSY = "busy"


class ChatMessageResponse(BaseModel):
    """Stored chat log message."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    role: ChatRole
    content: str
    created_at: Optional[datetime] = None
