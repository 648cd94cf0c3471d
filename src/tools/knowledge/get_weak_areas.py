# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Get weak areas tool.

Lists entries with mastery below 60 or confidence below 50, weakest first.
"""

from typing import Any

from src.core.tools import BaseTool, ToolContext, ToolResult
from src.domains.knowledge import KnowledgeService
from src.tools.knowledge.get_knowledge import format_entry

DEFAULT_LIMIT = 10


class GetWeakAreasTool(BaseTool):
    """Tool listing topics that need more practice."""

    @property
    def name(self) -> str:
        return "get_weak_areas"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Max number of weak areas to return",
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

        weak = await KnowledgeService(context.session, context.session_id).get_weak(limit=limit)

        if not weak:
            return ToolResult(
                success=True,
                data={"message": context.catalog.tools.message("no_weak_areas"), "entries": []},
            )

        return ToolResult(
            success=True,
            data={
                "message": "\n".join(format_entry(e) for e in weak),
                "entries": [e.model_dump(mode="json") for e in weak],
            },
        )
