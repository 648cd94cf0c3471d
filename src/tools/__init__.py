# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tool implementations offered to the model in single-turn replies.

Tools are organized by functional category:

- general: Off-topic questions (answer_general_question)
- learner: Profile, preferences, onboarding (get_user_context, update_user_profile,
  update_session_preferences)
- knowledge: Mastery tracking (update_knowledge, get_knowledge, get_weak_areas,
  reset_progress)
- quiz: Quiz ledger (record_quiz_result, get_quiz_history)
- study: Study sessions (start_study_session, end_study_session)

manifest.py lists every tool; loader.py builds registries from it.

Usage:
    from src.tools import get_default_tool_registry

    registry = get_default_tool_registry()
"""

from src.tools.loader import (
    create_registry,
    get_default_tool_registry,
    load_tool_class,
)
from src.tools.manifest import (
    TOOL_MANIFEST,
    get_available_tool_names,
    get_tool_info,
    get_tools_by_category,
)

__all__ = [
    # Factory functions
    "create_registry",
    "get_default_tool_registry",
    "load_tool_class",
    # Manifest access
    "TOOL_MANIFEST",
    "get_available_tool_names",
    "get_tool_info",
    "get_tools_by_category",
]
