# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tool registry for managing tool instances.

The registry handles tool registration, lookup, definition aggregation
for tool calling, and guarded execution.

Example:
    from src.core.tools import ToolRegistry

    registry = ToolRegistry()
    registry.register(GetKnowledgeTool())

    tools = registry.get_definitions()
    result = await registry.execute("get_knowledge", {}, context)
"""

import logging
from typing import Any

from src.core.tools.base import BaseTool, ToolContext, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry for managing tool instances.

    Example:
        registry = ToolRegistry()
        registry.register(RecordQuizResultTool())
        tool = registry.get("record_quiz_result")
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool in the registry.

        Raises:
            ValueError: If a tool with the same name already exists.
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def get(self, name: str) -> BaseTool:
        """Get a tool by name.

        Raises:
            KeyError: If the tool is not registered.
        """
        if name not in self._tools:
            raise KeyError(f"Tool '{name}' is not registered")

        return self._tools[name]

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def list_names(self) -> list[str]:
        """Get names of all registered tools, in registration order."""
        return list(self._tools.keys())

    def get_definitions(self) -> list[dict[str, Any]]:
        """Get OpenAI-compatible definitions for all tools."""
        return [tool.definition for tool in self._tools.values()]

    async def execute(
        self,
        name: str,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        """Validate and run a tool. Never raises.

        Unknown tools, invalid arguments and tool failures are returned as
        unsuccessful results so they can be reported back to the model.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Unknown tool requested: %s", name)
            return ToolResult(success=False, error=f"Unknown tool: {name}")

        try:
            tool.validate_params(params)
        except ValueError as e:
            return ToolResult(success=False, error=str(e))

        try:
            result = await tool.execute(params, context)
        except ValueError as e:
            # Includes pydantic ValidationError from argument parsing
            logger.warning("Tool %s rejected arguments: %s", name, e)
            return ToolResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Tool %s execution failed", name)
            return ToolResult(success=False, error=str(e))

        logger.debug("Tool executed: %s -> success=%s", name, result.success)
        return result

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        return f"ToolRegistry(tools={list(self._tools.keys())})"
