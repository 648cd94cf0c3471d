# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core tool infrastructure for model tool calling.

Base Classes:
    BaseTool: Abstract base class for all tools
    ToolContext: Context available to tools during execution
    ToolResult: Standardized result from tool execution

Registry:
    ToolRegistry: Registry for managing tool instances

Usage:
    from src.core.tools import BaseTool, ToolContext, ToolResult, ToolRegistry
"""

from src.core.tools.base import BaseTool, ToolContext, ToolResult
from src.core.tools.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolContext",
    "ToolResult",
    "ToolRegistry",
]
