# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for StudyPilot.

Importing this package registers every table on Base.metadata.
"""

from src.infrastructure.database.models.base import Base, TimestampMixin
from src.infrastructure.database.models.chat import ChatMessage
from src.infrastructure.database.models.learner import (
    KnowledgeEntry,
    QuizRecord,
    SessionPreferences,
    StudySession,
    UserProfile,
)
from src.infrastructure.database.models.plan import PlanSessionRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "UserProfile",
    "SessionPreferences",
    "KnowledgeEntry",
    "QuizRecord",
    "StudySession",
    "PlanSessionRecord",
    "ChatMessage",
]
