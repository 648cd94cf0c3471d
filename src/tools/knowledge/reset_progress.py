# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reset progress tool.

Deletes learner data of the session. Nothing is deleted unless the model
passes user_confirmed=true.
"""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.knowledge import InvalidResetScopeError, KnowledgeService
from src.models.knowledge import ResetScope


class ResetProgressTool(BaseTool):
    """Tool that clears knowledge, quizzes, study sessions or everything."""

    @property
    def name(self) -> str:
        return "reset_progress"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "scope": {
                    "type": "string",
                    "enum": [s.value for s in ResetScope],
                    "description": "What to reset",
                },
                "user_confirmed": {
                    "type": "boolean",
                    "description": "Must be true - only set after user explicitly confirms",
                },
            },
            "required": ["scope", "user_confirmed"],
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        """Reset the requested scope.

        Args:
            params: Tool parameters from the model.
                - scope: all, knowledge, quizzes or sessions
                - user_confirmed: Must be true
            context: Execution context.

        Returns:
            ToolResult; an unconfirmed call succeeds with a cancellation message.
        """
        tool_prompts = context.catalog.tools
        if params.get("user_confirmed") is not True:
            return ToolResult(success=True, data={"message": tool_prompts.message("reset_cancelled")})

        scope = str(params["scope"])
        try:
            await KnowledgeService(context.session, context.session_id).reset(scope)
        except InvalidResetScopeError as e:
            return ToolResult(success=False, error=str(e))

        if scope == ResetScope.ALL.value:
            message = tool_prompts.message("reset_done_all")
        else:
            message = tool_prompts.message("reset_done_scope", scope=scope)
        return ToolResult(success=True, data={"message": message, "scope": scope})
