# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Get user context tool.

Answers "what do you know about me" with a readable summary of profile,
topics studied, areas to review, recent quizzes and quiz stats.
"""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.learner_context import LearnerContextService


class GetUserContextTool(BaseTool):
    """Tool returning the formatted learner context."""

    @property
    def name(self) -> str:
        return "get_user_context"

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        service = LearnerContextService(context.session, context.session_id, context.prompts)
        summary = await service.format_for_display()
        return ToolResult(success=True, data={"message": summary})
