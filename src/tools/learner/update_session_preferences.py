# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Update session preferences tool.

Saves the session goal and the goal-specific choices, then tells the
model which question to ask next or which activity to start.
"""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.profile import InvalidPreferenceError, ProfileService
from src.models.profile import ExamDepth, Goal, SessionPreferencesUpdate
from src.models.quiz import QuizType
from src.tools.learner.onboarding import next_session_action


class UpdateSessionPreferencesTool(BaseTool):
    """Tool that saves session preferences."""

    @property
    def name(self) -> str:
        return "update_session_preferences"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "goal": {
                    "type": "string",
                    "enum": [g.value for g in Goal],
                    "description": "User's goal for this session",
                },
                "learn_topic": {"type": "string", "description": "Topic user wants to learn"},
                "learn_concept": {
                    "type": "string",
                    "description": "Specific concept within the topic",
                },
                "exam_name": {"type": "string", "description": "Name of the exam to prepare for"},
                "exam_depth": {
                    "type": "string",
                    "enum": [d.value for d in ExamDepth],
                    "description": "How in-depth to study",
                },
                "exam_time_left": {"type": "string", "description": "Time remaining until exam"},
                "quiz_topic": {"type": "string", "description": "Topic for the quiz"},
                "quiz_num_questions": {
                    "type": "integer",
                    "description": "Number of quiz questions",
                },
                "quiz_type": {
                    "type": "string",
                    "enum": [t.value for t in QuizType],
                    "description": "Type of quiz questions",
                },
                "quiz_hints_allowed": {
                    "type": "boolean",
                    "description": "Whether hints are allowed during quiz",
                },
                "onboarding_complete": {
                    "type": "boolean",
                    "description": "Whether onboarding is complete",
                },
            },
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        """Save the provided preferences.

        Returns:
            ToolResult with "Session saved. NEXT: ..." as message.
        """
        update = SessionPreferencesUpdate.model_validate(params)

        try:
            preferences = await ProfileService(
                context.session, context.session_id
            ).update_preferences(update)
        except InvalidPreferenceError as e:
            return ToolResult(success=False, error=str(e))

        tool_prompts = context.catalog.tools
        message = tool_prompts.message(
            "session_saved",
            next_action=next_session_action(preferences, tool_prompts),
        )
        return ToolResult(success=True, data={"message": message})
