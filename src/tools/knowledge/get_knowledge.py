# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Get knowledge tool."""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.knowledge import KnowledgeService
from src.models.knowledge import KnowledgeEntryResponse


def format_entry(entry: KnowledgeEntryResponse) -> str:
    """One line per entry: label, mastery, confidence and weak areas."""
    line = (
        f"- {entry.label}: {entry.mastery}% mastery, {entry.confidence}% confidence, "
        f"studied {entry.times_studied}x, quizzed {entry.times_quizzed}x"
    )
    if entry.weak_areas:
        line += f" (weak: {', '.join(entry.weak_areas)})"
    return line


class GetKnowledgeTool(BaseTool):
    """Tool listing the learner's knowledge entries."""

    @property
    def name(self) -> str:
        return "get_knowledge"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "subject": {
                    "type": "string",
                    "description": "Filter by subject (optional)",
                },
            },
        }

    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        subject = params.get("subject") or None
        entries = await KnowledgeService(context.session, context.session_id).get(subject)

        if not entries:
            return ToolResult(
                success=True,
                data={"message": context.catalog.tools.message("no_knowledge"), "entries": []},
            )

        return ToolResult(
            success=True,
            data={
                "message": "\n".join(format_entry(e) for e in entries),
                "entries": [e.model_dump(mode="json") for e in entries],
            },
        )
