# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prompt catalog for StudyPilot.

Usage:
    from src.core.prompts import get_prompt_catalog

    prompts = get_prompt_catalog()
    system = prompts.orchestration.classifier.system
    reply = prompts.tools.message("no_quiz_history")
"""

from src.core.prompts.loader import (
    PromptLoadError,
    get_prompt_catalog,
    load_prompt_catalog,
    reset_prompt_catalog,
)
from src.core.prompts.models import (
    ChatPrompts,
    ClassifierPrompts,
    OrchestrationPrompts,
    PlanCopy,
    PlannerPrompts,
    PromptCatalog,
    StepPrompts,
    ToolPrompts,
    TopicPrompts,
)

__all__ = [
    "PromptCatalog",
    "OrchestrationPrompts",
    "ClassifierPrompts",
    "PlannerPrompts",
    "StepPrompts",
    "TopicPrompts",
    "PlanCopy",
    "ChatPrompts",
    "ToolPrompts",
    "PromptLoadError",
    "load_prompt_catalog",
    "get_prompt_catalog",
    "reset_prompt_catalog",
]
