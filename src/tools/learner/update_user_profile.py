# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Update user profile tool.

Saves name, major, year or learning methods and tells the model which
onboarding question to ask next.
"""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.profile import InvalidPreferenceError, ProfileService
from src.models.profile import LearningMethod, UserProfileUpdate
from src.tools.learner.onboarding import next_profile_action


def _format_saved(fields: dict[str, Any]) -> str:
    parts = []
    for key, value in fields.items():
        if isinstance(value, list):
            parts.append(f"{key}=[{', '.join(str(v) for v in value)}]")
        else:
            parts.append(f"{key}={value}")
    return ", ".join(parts)


class UpdateUserProfileTool(BaseTool):
    """Tool that saves learner profile fields."""

    @property
    def name(self) -> str:
        return "update_user_profile"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "User's name"},
                "major": {"type": "string", "description": "User's major/field of study"},
                "year": {
                    "type": "string",
                    "description": "User's year (Freshman, Sophomore, Junior, Senior, Graduate)",
                },
                "preferred_learning_methods": {
                    "type": "array",
                    "items": {
                        "type": "string",
                        "enum": [m.value for m in LearningMethod],
                    },
                    "description": "User's preferred learning methods (can select 2-3)",
                },
            },
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        """Save the provided profile fields.

        Returns:
            ToolResult with "Saved: k=v, ... NEXT: ..." as message.
        """
        update = UserProfileUpdate.model_validate(params)
        provided = update.provided_fields()
        if not provided:
            return ToolResult(success=False, error="No profile fields provided")

        try:
            profile = await ProfileService(context.session, context.session_id).update_profile(update)
        except InvalidPreferenceError as e:
            return ToolResult(success=False, error=str(e))

        tool_prompts = context.catalog.tools
        message = tool_prompts.message(
            "profile_saved",
            saved=_format_saved(provided),
            next_action=next_profile_action(profile, tool_prompts, name=update.name),
        )
        return ToolResult(
            success=True,
            data={"message": message, "missing_fields": profile.missing_fields},
        )
