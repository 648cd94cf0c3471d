# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Knowledge domain: per-session mastery of (subject, topic) pairs."""

from src.domains.knowledge.scoring import (
    PLAN_LEARNED_MASTERY,
    is_weak,
    merge_weak_areas,
    quiz_mastery,
    weighted_mastery,
)
from src.domains.knowledge.service import (
    InvalidResetScopeError,
    KnowledgeService,
    KnowledgeServiceError,
)

__all__ = [
    "KnowledgeService",
    "KnowledgeServiceError",
    "InvalidResetScopeError",
    "PLAN_LEARNED_MASTERY",
    "is_weak",
    "merge_weak_areas",
    "quiz_mastery",
    "weighted_mastery",
]
