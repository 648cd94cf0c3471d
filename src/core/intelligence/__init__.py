# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intelligence module for AI-powered operations.

All inference goes through LiteLLM, which gives StudyPilot support for
Ollama, OpenAI, Anthropic, Google, and many other providers.

Example:
    >>> from src.core.intelligence import LLMClient
    >>> client = LLMClient()
    >>> response = await client.complete("What is 2+2?")
"""

from src.core.intelligence.llm import LLMClient, LLMError

__all__ = [
    "LLMClient",
    "LLMError",
]
