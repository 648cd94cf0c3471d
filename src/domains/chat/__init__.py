# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chat domain.

Provides the chat log of a session, the single-turn responder and the
ChatService entry point that routes each incoming message.
"""

from src.domains.chat.message_log import ChatMessageLog
from src.domains.chat.responder import ConversationalResponder
from src.domains.chat.service import ChatReply, ChatService, create_chat_service

__all__ = [
    "ChatMessageLog",
    "ConversationalResponder",
    "ChatReply",
    "ChatService",
    "create_chat_service",
]
