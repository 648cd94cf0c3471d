# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base classes for the tool system.

This module defines the foundational classes for the tool system:
- ToolContext: Context available to tools during execution
- ToolResult: Standardized result from tool execution
- BaseTool: Abstract base class for all tools

Tools are executed by the single-turn responder when the model requests
an action through tool calling. They are the named knowledge, quiz and
profile operations exposed to the model. A tool never raises to the
model: failures come back as ToolResult(success=False, error=...).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from src.core.prompts import PromptCatalog, get_prompt_catalog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from src.core.intelligence.llm import LLMClient


@dataclass
class ToolContext:
    """Context available to tools during execution.

    Attributes:
        session_id: Session whose learner data the tool reads and writes.
        session: Database session for queries.
        llm: Inference client, for tools that ask the model themselves.
        prompts: Prompt catalog, defaults to the process-wide one.
        extra: Additional context that tools might need.
    """

    session_id: str
    session: "AsyncSession | None" = None
    llm: "LLMClient | None" = None
    prompts: Optional[PromptCatalog] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def catalog(self) -> PromptCatalog:
        """Get the prompt catalog for this execution."""
        return self.prompts or get_prompt_catalog()


@dataclass
class ToolResult:
    """Result from tool execution.

    Attributes:
        success: Whether the tool executed successfully.
        data: Tool-specific result data. Should include a 'message' key
            for human-readable output to the model.
        error: Error message if success is False.
    """

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def to_llm_message(self) -> str:
        """Convert result to message for the model.

        Returns:
            The 'message' entry of data, or an error line on failure.
        """
        if not self.success:
            return f"Error: {self.error}"

        message = self.data.get("message", "")
        return message if message else "Operation completed successfully."


class BaseTool(ABC):
    """Abstract base class for all tools.

    The tool lifecycle:
    1. The model receives tool definitions via the `definition` property
    2. The model calls the tool with arguments
    3. The responder executes the tool via `execute()`
    4. The result message is sent back to the model

    Descriptions are not hard-coded: `definition` reads them from the
    ``tools.descriptions`` section of the prompt catalog, keyed by tool name.
    Subclasses provide `name`, `parameters` and `execute()`.

    Example:
        class GetKnowledgeTool(BaseTool):
            @property
            def name(self) -> str:
                return "get_knowledge"

            @property
            def parameters(self) -> dict[str, Any]:
                return {"type": "object", "properties": {"subject": {"type": "string"}}}

            async def execute(self, params, context) -> ToolResult:
                entries = await KnowledgeService(context.session, context.session_id).get()
                return ToolResult(success=True, data={"message": ...})
    """

    def __init__(self, prompts: Optional[PromptCatalog] = None) -> None:
        self._prompts = prompts

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name matching the function name in definition."""
        pass

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON schema of the tool arguments. No arguments by default."""
        return {"type": "object", "properties": {}}

    @property
    def definition(self) -> dict[str, Any]:
        """OpenAI-compatible tool definition.

        Returns:
            Dictionary with tool definition in OpenAI format.
        """
        catalog = self._prompts or get_prompt_catalog()
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": catalog.tools.description(self.name),
                "parameters": self.parameters,
            },
        }

    @abstractmethod
    async def execute(
        self,
        params: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        """Execute the tool with given parameters.

        Args:
            params: Arguments from the model's tool call.
            context: Execution context with session id and database session.

        Returns:
            ToolResult with success status and data.
        """
        pass

    def validate_params(self, params: dict[str, Any]) -> None:
        """Validate parameters before execution.

        Checks that every argument listed as required in `parameters` is
        present. Override to add tool-specific checks.

        Raises:
            ValueError: If parameters are invalid.
        """
        missing = [
            key for key in self.parameters.get("required", [])
            if params.get(key) is None
        ]
        if missing:
            raise ValueError(f"Missing required argument(s): {', '.join(missing)}")
