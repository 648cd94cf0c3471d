# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Start study session tool."""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.study_session import InvalidSessionTypeError, StudySessionService
from src.models.study import SessionType


class StartStudySessionTool(BaseTool):
    """Tool that opens a study session and returns its id."""

    @property
    def name(self) -> str:
        return "start_study_session"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "session_type": {
                    "type": "string",
                    "enum": [t.value for t in SessionType],
                    "description": "Type of study session",
                },
                "subject": {"type": "string", "description": "Subject being studied"},
                "topic": {"type": "string", "description": "Topic being studied"},
            },
            "required": ["session_type"],
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        try:
            study_session_id = await StudySessionService(
                context.session, context.session_id
            ).start(
                session_type=str(params["session_type"]),
                subject=params.get("subject") or None,
                topic=params.get("topic") or None,
            )
        except InvalidSessionTypeError as e:
            return ToolResult(success=False, error=str(e))

        message = context.catalog.tools.message("study_session_started", session_id=study_session_id)
        return ToolResult(success=True, data={"message": message, "study_session_id": study_session_id})
