# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Update knowledge tool.

Records that the learner studied a topic. Each call counts as one study
and refreshes last_studied; mastery and confidence are set when given.
"""

from typing import Any

from pydantic import BaseModel, Field

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.knowledge import KnowledgeService


class _UpdateKnowledgeParams(BaseModel):
    subject: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    mastery_level: int | None = Field(default=None, ge=0, le=100)
    confidence_level: int | None = Field(default=None, ge=0, le=100)
    weak_areas: list[str] | None = None
    notes: str | None = None


class UpdateKnowledgeTool(BaseTool):
    """Tool that records study of a (subject, topic) pair."""

    @property
    def name(self) -> str:
        return "update_knowledge"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "subject": {
                    "type": "string",
                    "description": "Main subject (e.g., 'Calculus', 'Biology')",
                },
                "topic": {
                    "type": "string",
                    "description": "Specific topic (e.g., 'Derivatives', 'Cell Division')",
                },
                "mastery_level": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 100,
                    "description": "Estimated mastery level 0-100",
                },
                "confidence_level": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 100,
                    "description": "User's self-reported confidence 0-100",
                },
                "weak_areas": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Specific concepts user struggles with",
                },
                "notes": {
                    "type": "string",
                    "description": "Notes about user's understanding",
                },
            },
            "required": ["subject", "topic"],
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        args = _UpdateKnowledgeParams.model_validate(params)

        entry = await KnowledgeService(context.session, context.session_id).record_study(
            subject=args.subject,
            topic=args.topic,
            mastery=args.mastery_level,
            confidence=args.confidence_level,
            increment_study_count=True,
            weak_areas=args.weak_areas,
            notes=args.notes,
        )

        tool_prompts = context.catalog.tools
        suffix = ""
        if args.mastery_level is not None:
            suffix = tool_prompts.message("knowledge_mastery_suffix", mastery=entry.mastery)
        message = tool_prompts.message(
            "knowledge_updated",
            subject=entry.subject,
            topic=entry.topic,
            mastery_suffix=suffix,
        )
        return ToolResult(success=True, data={"message": message, "entry": entry.model_dump(mode="json")})
