# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM client using LiteLLM for multi-provider support.

This module is the single inference boundary of StudyPilot. Every call
returns either normalized text (LLMResponse / LLMToolResponse) or raises
LLMError; callers never look at raw provider response shapes.

API keys and endpoints are passed directly to LiteLLM's acompletion()
function rather than through environment variables.

Supported providers:
- Ollama: Local or remote LLM inference
- OpenAI: GPT-4o, GPT-4o-mini, etc.
- Anthropic: Claude 3.5
- Google: Gemini models

Example:
    >>> from src.core.intelligence.llm import LLMClient
    >>> client = LLMClient()
    >>> response = await client.complete("Explain quantum computing")
    >>> print(response.content)
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm
from litellm import acompletion

from src.core.config.settings import LLMSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from an LLM completion.

    Attributes:
        content: The generated text content.
        model: The model that generated the response.
        tokens_input: Number of input tokens used.
        tokens_output: Number of output tokens generated.
        finish_reason: Why generation stopped (stop, length, etc.).
        raw_response: Original response object from LiteLLM.
    """

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    raw_response: Optional[object] = field(default=None, repr=False)


@dataclass
class ToolCall:
    """A tool call requested by the LLM.

    Attributes:
        id: Unique identifier for this tool call.
        name: Name of the tool to execute.
        arguments: Arguments to pass to the tool.
    """

    id: str
    name: str
    arguments: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the OpenAI tool_calls entry format."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": json.dumps(self.arguments)},
        }


@dataclass
class LLMToolResponse:
    """Response from an LLM completion with tool calling support.

    Attributes:
        content: The generated text content (may be empty if tool_calls present).
        model: The model that generated the response.
        tokens_input: Number of input tokens used.
        tokens_output: Number of output tokens generated.
        finish_reason: Why generation stopped (stop, tool_calls, length, etc.).
        tool_calls: List of tool calls requested by the LLM.
        raw_response: Original response object from LiteLLM.
    """

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    tool_calls: list[ToolCall] = field(default_factory=list)
    raw_response: Optional[object] = field(default=None, repr=False)

    @property
    def has_tool_calls(self) -> bool:
        """Check if response contains tool calls."""
        return len(self.tool_calls) > 0

    def to_assistant_message(self) -> dict[str, Any]:
        """Build the assistant message that echoes this response back to the model."""
        message: dict[str, Any] = {"role": "assistant", "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        return message


class LLMError(Exception):
    """Exception raised when LLM operation fails.

    Attributes:
        message: Error description.
        model: Model that caused the error.
        error_code: Error code if available.
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.model = model
        self.error_code = error_code
        self.original_error = original_error
        super().__init__(self.message)


@dataclass
class Message:
    """A message in a conversation.

    Attributes:
        role: Message role (system, user, assistant).
        content: Message text content.
    """

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary format for LiteLLM."""
        return {"role": self.role, "content": self.content}


def _parse_arguments(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


class LLMClient:
    """Client for LLM operations via LiteLLM.

    Attributes:
        model: Default model to use for completions.
        timeout: Request timeout in seconds.
        max_retries: Maximum retry attempts.

    Example:
        >>> client = LLMClient()
        >>> response = await client.complete(
        ...     prompt="What is machine learning?",
        ...     temperature=0.7,
        ... )
        >>> print(response.content)
    """

    def __init__(
        self,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        llm_settings: Optional[LLMSettings] = None,
    ):
        """Initialize the LLM client.

        Args:
            model: Default model in LiteLLM format. Falls back to settings.
            timeout: Request timeout in seconds. Falls back to settings.
            max_retries: Maximum retry attempts. Falls back to settings.
            llm_settings: LLM configuration. Uses get_settings() if None.
        """
        self._settings = llm_settings or get_settings().llm

        self._model = model or self._settings.get_default_model()
        self._timeout = timeout or self._settings.request_timeout
        self._max_retries = (
            max_retries if max_retries is not None else self._settings.max_retries
        )

        litellm.drop_params = True

        logger.info(
            "LLMClient initialized with model=%s, timeout=%.1fs, max_retries=%d",
            self._model,
            self._timeout,
            self._max_retries,
        )

    @property
    def model(self) -> str:
        """Get the default model."""
        return self._model

    @property
    def timeout(self) -> float:
        """Get the request timeout."""
        return self._timeout

    @property
    def max_retries(self) -> int:
        """Get the maximum retry count."""
        return self._max_retries

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        messages: Optional[list[Message]] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion for the given prompt.

        Args:
            prompt: User prompt text.
            model: Override default model for this request.
            system_prompt: Optional system prompt to set context.
            messages: Previous conversation messages (if multi-turn).
            temperature: Sampling temperature (0-2).
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional LiteLLM parameters.

        Returns:
            LLMResponse with generated content and metadata.

        Raises:
            LLMError: If generation fails after retries.
            ValueError: If prompt is empty.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        chat_messages: list[dict[str, Any]] = []
        if system_prompt:
            chat_messages.append({"role": "system", "content": system_prompt})
        if messages:
            chat_messages.extend(m.to_dict() for m in messages)
        chat_messages.append({"role": "user", "content": prompt})

        return await self.complete_with_messages(
            chat_messages,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

    async def complete_with_messages(
        self,
        messages: list[dict[str, Any]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion from a list of OpenAI-format messages.

        Raises:
            LLMError: If completion fails after retries.
            ValueError: If messages list is empty.
        """
        if not messages:
            raise ValueError("Messages list cannot be empty")

        use_model = model or self._model

        try:
            response = await acompletion(
                model=use_model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=self._timeout,
                num_retries=self._max_retries,
                **self._settings.get_provider_params(use_model),
                **kwargs,
            )
        except Exception as e:
            logger.error(
                "Completion failed: model=%s, messages=%d, error=%s",
                use_model,
                len(messages),
                str(e),
            )
            raise LLMError(
                message=f"Completion failed: {str(e)}",
                model=use_model,
                original_error=e,
            ) from e

        if not response.choices:
            raise LLMError(
                message="LLM returned empty response with no choices",
                model=use_model,
                error_code="empty_choices",
            )

        choice = response.choices[0]
        usage = getattr(response, "usage", None)
        result = LLMResponse(
            content=choice.message.content or "",
            model=use_model,
            tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_output=getattr(usage, "completion_tokens", 0) or 0,
            finish_reason=choice.finish_reason or "stop",
            raw_response=response,
        )

        logger.debug(
            "Completion generated: model=%s, tokens_in=%d, tokens_out=%d",
            use_model,
            result.tokens_input,
            result.tokens_output,
        )
        return result

    async def complete_with_tools(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        tool_choice: str = "auto",
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any,
    ) -> LLMToolResponse:
        """Generate a completion with tool calling support.

        The response may contain tool_calls that should be executed, with
        results sent back in a follow-up call as role='tool' messages.

        Args:
            messages: Conversation messages in OpenAI format.
            tools: Tool definitions in OpenAI format.
            tool_choice: "auto", "none" or "required".
            model: Override default model for this request.
            temperature: Sampling temperature (0-2).
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional LiteLLM parameters.

        Returns:
            LLMToolResponse with content and/or tool_calls.

        Raises:
            LLMError: If completion fails after retries.
            ValueError: If messages list is empty.
        """
        if not messages:
            raise ValueError("Messages list cannot be empty")

        use_model = model or self._model
        tool_kwargs: dict[str, Any] = {}
        if tools:
            tool_kwargs = {"tools": tools, "tool_choice": tool_choice}

        try:
            response = await acompletion(
                model=use_model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=self._timeout,
                num_retries=self._max_retries,
                **tool_kwargs,
                **self._settings.get_provider_params(use_model),
                **kwargs,
            )
        except Exception as e:
            logger.error(
                "Tool completion failed: model=%s, error=%s",
                use_model,
                str(e),
            )
            raise LLMError(
                message=f"Tool completion failed: {str(e)}",
                model=use_model,
                original_error=e,
            ) from e

        if not response.choices:
            logger.error(
                "LLM returned empty choices: model=%s, response=%s",
                use_model,
                str(response)[:1000],
            )
            raise LLMError(
                message="LLM returned empty response with no choices",
                model=use_model,
                error_code="empty_choices",
            )

        message = response.choices[0].message
        parsed_tool_calls = [
            ToolCall(
                id=tc.id,
                name=tc.function.name,
                arguments=_parse_arguments(tc.function.arguments),
            )
            for tc in (getattr(message, "tool_calls", None) or [])
            if tc.function.name
        ]

        usage = getattr(response, "usage", None)
        result = LLMToolResponse(
            content=message.content or "",
            model=use_model,
            tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_output=getattr(usage, "completion_tokens", 0) or 0,
            finish_reason=response.choices[0].finish_reason or "stop",
            tool_calls=parsed_tool_calls,
            raw_response=response,
        )

        logger.debug(
            "Tool completion generated: model=%s, tokens_in=%d, tokens_out=%d, tool_calls=%d",
            use_model,
            result.tokens_input,
            result.tokens_output,
            len(parsed_tool_calls),
        )
        return result

    def __repr__(self) -> str:
        return (
            f"LLMClient(model={self._model!r}, "
            f"timeout={self._timeout}, max_retries={self._max_retries})"
        )
