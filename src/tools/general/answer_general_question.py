# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Answer general question tool.

Fallback for weather, facts, greetings and anything else that does not
fit a learner data tool. The question is answered by a separate model call
without tools, so the main reply never refuses.
"""

from typing import Any

from src.core.config.settings import get_settings
from src.core.intelligence.llm import LLMClient, LLMError
from src.core.tools import BaseTool, ToolContext, ToolResult


class AnswerGeneralQuestionTool(BaseTool):
    """Tool that answers a general question with a plain completion."""

    @property
    def name(self) -> str:
        return "answer_general_question"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "question": {
                    "type": "string",
                    "description": "The user's question or message to answer",
                },
            },
            "required": ["question"],
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        """Answer the question.

        Args:
            params: Tool parameters from the model.
                - question: The question to answer
            context: Execution context; context.llm is used when set.

        Returns:
            ToolResult whose message is the answer.
        """
        question = str(params["question"]).strip()
        if not question:
            return ToolResult(success=False, error="question must not be empty")

        llm = context.llm or LLMClient()
        try:
            response = await llm.complete(
                prompt=question,
                system_prompt=context.catalog.chat.general_question_system,
                max_tokens=get_settings().plan.general_max_tokens,
            )
        except LLMError as e:
            return ToolResult(success=False, error=f"Could not answer the question: {e.message}")

        return ToolResult(success=True, data={"message": response.content})
