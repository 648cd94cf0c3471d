# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Single-turn responder with tool calling.

Answers a CONVERSATIONAL message in one turn. The model sees the learner
system prompt, the recent chat log and the tool definitions, may call
tools for up to ``max_tool_rounds`` rounds, and its final text is
appended to the chat log.

Inference failures are not hidden: they surface as the reply text.
"""

import json
import logging
from typing import Any, AsyncIterator, Optional

from src.core.config.settings import PlanSettings, get_settings
from src.core.intelligence.llm import LLMClient, LLMError, LLMToolResponse
from src.core.prompts import PromptCatalog, get_prompt_catalog
from src.core.tools import ToolContext, ToolRegistry
from src.domains.chat.message_log import ChatMessageLog
from src.domains.learner_context import LearnerContextService
from src.infrastructure.database.connection import SessionFactory
from src.models.chat import ChatRole

logger = logging.getLogger(__name__)

_DUPLICATE_CALL = "Tool {name} was already called with these parameters. Use the previous result."
_UNKNOWN_TOOL = (
    "This tool does not exist. "
    "Please respond directly to the user without calling any tool."
)


def tool_signature(name: str, arguments: dict[str, Any]) -> str:
    """Normalized signature of a tool call; null and empty arguments are ignored."""
    normalized = {k: v for k, v in arguments.items() if v is not None and v != ""}
    return f"{name}:{json.dumps(normalized, sort_keys=True, default=str)}"


class ConversationalResponder:
    """Produces single-turn replies.

    Attributes:
        _session_factory: Opens the database session used for one reply.
        _llm: Inference client.
        _registry: Tools offered to the model.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        llm: LLMClient,
        registry: ToolRegistry,
        prompts: Optional[PromptCatalog] = None,
        plan_settings: Optional[PlanSettings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._llm = llm
        self._registry = registry
        self._prompts = prompts or get_prompt_catalog()
        self._limits = plan_settings or get_settings().plan

    async def stream(self, session_id: str) -> AsyncIterator[str]:
        """Yield the reply to the latest user message of the session."""
        yield await self.respond(session_id)

    async def respond(self, session_id: str) -> str:
        """Reply to the latest user message of the session.

        The user message must already be in the chat log. The reply is
        appended to the log before it is returned.

        Returns:
            The reply text; never empty.
        """
        chat_prompts = self._prompts.chat

        async with self._session_factory() as db:
            log = ChatMessageLog(db, session_id)
            system_prompt = await LearnerContextService(
                db, session_id, self._prompts
            ).build_system_prompt()
            history = await log.recent(limit=self._limits.history_messages)

            messages: list[dict[str, Any]] = [{"role": "system", "content": system_prompt}]
            messages.extend({"role": m.role.value, "content": m.content} for m in history)

            context = ToolContext(
                session_id=session_id,
                session=db,
                llm=self._llm,
                prompts=self._prompts,
            )

            try:
                reply = await self._run_tool_loop(messages, context)
            except LLMError as e:
                logger.warning("Single-turn reply failed: session=%s, error=%s", session_id, e)
                reply = PromptCatalog.render(chat_prompts.error_reply, error=e.message)

            reply = reply.strip() or chat_prompts.empty_reply
            await log.append(ChatRole.ASSISTANT, reply)

        return reply

    async def _run_tool_loop(
        self,
        messages: list[dict[str, Any]],
        context: ToolContext,
    ) -> str:
        """Call the model until it answers without tool calls.

        Raises:
            LLMError: If a model call fails.
        """
        tool_definitions = self._registry.get_definitions()
        current_tools = tool_definitions
        tool_choice = "auto"
        called_signatures: set[str] = set()
        is_gemini = self._llm.model.startswith("gemini/")

        for round_number in range(1, self._limits.max_tool_rounds + 1):
            response = await self._call(messages, current_tools, tool_choice)

            if not response.has_tool_calls:
                logger.info(
                    "Single-turn reply completed: session=%s, rounds=%d",
                    context.session_id,
                    round_number,
                )
                return response.content

            messages.append(response.to_assistant_message())
            logger.info("Model requested tools: %s", [tc.name for tc in response.tool_calls])

            stop_chaining = False
            for tool_call in response.tool_calls:
                signature = tool_signature(tool_call.name, tool_call.arguments)

                if signature in called_signatures:
                    logger.warning("Skipping duplicate tool call: %s", tool_call.name)
                    content = _DUPLICATE_CALL.format(name=tool_call.name)
                elif tool_call.name not in self._registry:
                    logger.warning("Unknown tool: %s - forcing text response", tool_call.name)
                    content = _UNKNOWN_TOOL
                    stop_chaining = True
                else:
                    called_signatures.add(signature)
                    result = await self._registry.execute(
                        tool_call.name, tool_call.arguments, context
                    )
                    if not result.success and context.session is not None:
                        # Nothing a failed tool staged may reach the final commit
                        await context.session.rollback()
                    content = result.to_llm_message()

                # Gemini rejects the 'name' field in tool messages
                tool_message: dict[str, Any] = {
                    "role": "tool",
                    "tool_call_id": tool_call.id,
                    "content": content,
                }
                if not is_gemini:
                    tool_message["name"] = tool_call.name
                messages.append(tool_message)

            if stop_chaining:
                current_tools = []
                tool_choice = "none"
            else:
                current_tools = tool_definitions
                tool_choice = "auto"

        logger.warning(
            "Max tool rounds reached, forcing text response: session=%s, rounds=%d",
            context.session_id,
            self._limits.max_tool_rounds,
        )
        response = await self._call(messages, [], "none")
        return response.content

    async def _call(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        tool_choice: str,
    ) -> LLMToolResponse:
        return await self._llm.complete_with_tools(
            messages=messages,
            tools=tools,
            tool_choice=tool_choice,
            max_tokens=self._limits.chat_max_tokens,
        )
