# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chat entry point: one incoming message, one reply.

ChatService.handle_message routes a message to one of three replies:

- BUSY: a plan is still processing for the session. The message is kept
  in the chat log but not answered; one plan runs per session at a time.
  A plan that has stopped making progress is enqueued again.
- STREAM: a single-turn reply from ConversationalResponder.
- ACKNOWLEDGMENT: a LEARNING request was decomposed into two or more
  steps; the combined document is appended to the chat log later.

Example:
    >>> service = create_chat_service(db_manager.get_session, DramatiqContinuationQueue())
    >>> reply = await service.handle_message("abc", "Explain recursion fully")
    >>> reply.kind
    <ReplyKind.ACKNOWLEDGMENT: 'acknowledgment'>
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterator, Optional

from src.core.intelligence.llm import LLMClient
from src.core.prompts import PromptCatalog, get_prompt_catalog
from src.domains.chat.message_log import ChatMessageLog
from src.domains.chat.responder import ConversationalResponder
from src.infrastructure.database.connection import SessionFactory
from src.models.chat import ChatRole, Intent, ReplyKind

if TYPE_CHECKING:
    from src.core.config.settings import PlanSettings
    from src.core.orchestration import (
        ContinuationQueue,
        IntentClassifier,
        PlanGenerator,
        PlanScheduler,
    )

logger = logging.getLogger(__name__)


@dataclass
class ChatReply:
    """Reply to one incoming message.

    Attributes:
        kind: STREAM, ACKNOWLEDGMENT or BUSY.
        text: The acknowledgment or busy notice; None for STREAM.
        stream: Async iterator of reply text chunks; only for STREAM.
    """

    kind: ReplyKind
    text: Optional[str] = None
    stream: Optional[AsyncIterator[str]] = None


class ChatService:
    """Routes incoming messages between the single-turn and plan paths."""

    def __init__(
        self,
        session_factory: SessionFactory,
        classifier: "IntentClassifier",
        planner: "PlanGenerator",
        scheduler: "PlanScheduler",
        responder: ConversationalResponder,
        prompts: Optional[PromptCatalog] = None,
    ) -> None:
        self._session_factory = session_factory
        self._classifier = classifier
        self._planner = planner
        self._scheduler = scheduler
        self._responder = responder
        self._prompts = prompts or get_prompt_catalog()

    async def handle_message(
        self,
        session_id: str,
        message: str,
        last_assistant_message: Optional[str] = None,
    ) -> ChatReply:
        """Handle one incoming user message.

        Args:
            session_id: Session the message belongs to.
            message: The user's message.
            last_assistant_message: Prior assistant utterance used to
                classify short follow-ups. Read from the chat log when None.

        Returns:
            The reply; a STREAM reply is only produced while it is iterated.
        """
        async with self._session_factory() as db:
            log = ChatMessageLog(db, session_id)
            if last_assistant_message is None:
                last_assistant_message = await log.last_assistant_message()
            await log.append(ChatRole.USER, message)

        if await self._scheduler.is_busy(session_id):
            logger.info("Plan in progress, message not answered: session=%s", session_id)
            await self._scheduler.resume_if_stalled(session_id)
            return self._busy_reply()

        intent = await self._classifier.classify(message, last_assistant_message)
        logger.info("Message classified: session=%s, intent=%s", session_id, intent.value)

        if intent == Intent.LEARNING:
            from src.core.orchestration.plan_store import PlanBusyError

            steps = await self._planner.generate(message)
            if len(steps) > 1:
                try:
                    acknowledgment = await self._scheduler.start(session_id, message, steps)
                except PlanBusyError:
                    logger.info("Concurrent plan won the session: session=%s", session_id)
                    return self._busy_reply()
                return ChatReply(kind=ReplyKind.ACKNOWLEDGMENT, text=acknowledgment)
            logger.info("Single-step plan, answering directly: session=%s", session_id)

        return ChatReply(kind=ReplyKind.STREAM, stream=self._responder.stream(session_id))

    def _busy_reply(self) -> ChatReply:
        return ChatReply(kind=ReplyKind.BUSY, text=self._prompts.chat.busy_notice)


def create_chat_service(
    session_factory: SessionFactory,
    queue: "ContinuationQueue",
    llm: Optional[LLMClient] = None,
    prompts: Optional[PromptCatalog] = None,
    plan_settings: Optional["PlanSettings"] = None,
) -> ChatService:
    """Build a ChatService with its classifier, planner, scheduler and responder."""
    from src.core.config.settings import get_settings
    from src.core.orchestration import (
        IntentClassifier,
        PlanGenerator,
        create_plan_scheduler,
    )
    from src.tools import get_default_tool_registry

    llm = llm or LLMClient()
    prompts = prompts or get_prompt_catalog()
    plan_settings = plan_settings or get_settings().plan

    return ChatService(
        session_factory=session_factory,
        classifier=IntentClassifier(llm, prompts, plan_settings),
        planner=PlanGenerator(llm, prompts, plan_settings),
        scheduler=create_plan_scheduler(session_factory, queue, llm, prompts, plan_settings),
        responder=ConversationalResponder(
            session_factory,
            llm,
            get_default_tool_registry(prompts),
            prompts,
            plan_settings,
        ),
        prompts=prompts,
    )
