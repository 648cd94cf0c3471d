# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""End study session tool."""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.study_session import StudySessionNotFoundError, StudySessionService


class EndStudySessionTool(BaseTool):
    """Tool that closes a study session and stores its summary."""

    @property
    def name(self) -> str:
        return "end_study_session"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "session_id": {
                    "type": "integer",
                    "description": "ID of the study session to end",
                },
                "summary": {
                    "type": "string",
                    "description": "Summary of what was covered",
                },
            },
            "required": ["session_id"],
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        try:
            study_session_id = int(params["session_id"])
        except (TypeError, ValueError):
            return ToolResult(success=False, error=f"Invalid session_id: {params['session_id']}")

        try:
            ended = await StudySessionService(context.session, context.session_id).end(
                study_session_id,
                summary=params.get("summary"),
            )
        except StudySessionNotFoundError as e:
            return ToolResult(success=False, error=str(e))

        message = context.catalog.tools.message("study_session_ended", session_id=ended.id)
        return ToolResult(
            success=True,
            data={"message": message, "duration_minutes": ended.duration_minutes},
        )
