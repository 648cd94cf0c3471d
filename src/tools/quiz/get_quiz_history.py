# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Get quiz history tool."""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.quiz import QuizService
from src.models.quiz import QuizRecordResponse

DEFAULT_LIMIT = 20


def _format_record(record: QuizRecordResponse) -> str:
    label = f"{record.subject} > {record.topic}" if record.topic else record.subject
    date = record.quiz_date.date().isoformat() if record.quiz_date else "?"
    line = (
        f"- {date} {label}: {record.score}% "
        f"({record.correct_answers}/{record.total_questions}, {record.quiz_type})"
    )
    if record.missed_concepts:
        line += f" missed: {', '.join(record.missed_concepts)}"
    return line


class GetQuizHistoryTool(BaseTool):
    """Tool listing recent quiz results, newest first."""

    @property
    def name(self) -> str:
        return "get_quiz_history"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "subject": {"type": "string", "description": "Filter by subject"},
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Number of results",
                },
            },
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        limit = int(params.get("limit") or DEFAULT_LIMIT)
        if limit < 1:
            return ToolResult(success=False, error="limit must be at least 1")

        records = await QuizService(context.session, context.session_id).history(
            subject=params.get("subject") or None,
            limit=limit,
        )

        if not records:
            return ToolResult(
                success=True,
                data={"message": context.catalog.tools.message("no_quiz_history"), "quizzes": []},
            )

        return ToolResult(
            success=True,
            data={
                "message": "\n".join(_format_record(r) for r in records),
                "quizzes": [r.model_dump(mode="json") for r in records],
            },
        )
