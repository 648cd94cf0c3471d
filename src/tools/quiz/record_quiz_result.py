# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record quiz result tool.

Appends a finished quiz to the ledger. With a topic, the knowledge entry
for (subject, topic) is updated from the score as well.
"""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.quiz import InvalidQuizTypeError, QuizService
from src.models.quiz import QuizResultCreate, QuizType


class RecordQuizResultTool(BaseTool):
    """Tool that records a quiz result."""

    @property
    def name(self) -> str:
        return "record_quiz_result"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "subject": {"type": "string", "description": "Quiz subject"},
                "topic": {"type": "string", "description": "Quiz topic (optional)"},
                "quiz_type": {
                    "type": "string",
                    "enum": [t.value for t in QuizType],
                    "description": "Type of quiz",
                },
                "score": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 100,
                    "description": "Score as percentage 0-100",
                },
                "total_questions": {"type": "integer", "description": "Total questions"},
                "correct_answers": {"type": "integer", "description": "Correct answers"},
                "missed_concepts": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Concepts the user got wrong",
                },
                "time_spent_seconds": {
                    "type": "integer",
                    "description": "Time spent on quiz in seconds",
                },
                "hints_used": {"type": "integer", "description": "Number of hints used"},
            },
            "required": ["subject", "quiz_type", "score", "total_questions", "correct_answers"],
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        result = QuizResultCreate.model_validate(params)

        try:
            record_id = await QuizService(context.session, context.session_id).record(result)
        except InvalidQuizTypeError as e:
            return ToolResult(success=False, error=str(e))

        tool_prompts = context.catalog.tools
        if result.missed_concepts:
            review_line = tool_prompts.message(
                "quiz_review_line", concepts=", ".join(result.missed_concepts)
            )
        else:
            review_line = tool_prompts.message("quiz_perfect")

        message = tool_prompts.message(
            "quiz_recorded",
            score=result.score,
            subject=result.subject,
            topic_suffix=f" > {result.topic}" if result.topic else "",
            review_line=review_line,
        )
        return ToolResult(success=True, data={"message": message, "quiz_id": record_id})
