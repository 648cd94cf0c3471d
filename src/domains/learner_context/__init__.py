# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner context domain: one snapshot of everything known about the learner."""

from src.domains.learner_context.formatting import (
    build_system_prompt,
    format_for_display,
    is_real_topic,
)
from src.domains.learner_context.service import LearnerContextService

__all__ = [
    "LearnerContextService",
    "build_system_prompt",
    "format_for_display",
    "is_real_topic",
]
