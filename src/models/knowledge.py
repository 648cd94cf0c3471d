# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Knowledge entry schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ResetScope(str, Enum):
    """What a progress reset clears."""

    ALL = "all"
    KNOWLEDGE = "knowledge"
    QUIZZES = "quizzes"
    SESSIONS = "sessions"


class KnowledgeUpdate(BaseModel):
    """Partial write to one (subject, topic) entry.

    Fields left as None keep their stored value, or take the creation
    default (0 / empty) when the entry does not exist yet.

    Attributes:
        mastery: New mastery level, 0-100.
        confidence: New confidence level, 0-100.
        times_studied: New times_studied value.
        times_quizzed: New times_quizzed value.
        mark_studied: Refresh last_studied to now.
        mark_quizzed: Refresh last_quizzed to now.
        weak_areas: Replacement weak area list.
        notes: Free-text observations.
    """

    mastery: Optional[int] = Field(default=None, ge=0, le=100)
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    times_studied: Optional[int] = Field(default=None, ge=0)
    times_quizzed: Optional[int] = Field(default=None, ge=0)
    mark_studied: bool = False
    mark_quizzed: bool = False
    weak_areas: Optional[list[str]] = None
    notes: Optional[str] = None


class KnowledgeEntryResponse(BaseModel):
    """Stored knowledge entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    subject: str
    topic: str
    mastery: int = 0
    confidence: int = 0
    times_studied: int = 0
    times_quizzed: int = 0
    last_studied: Optional[datetime] = None
    last_quizzed: Optional[datetime] = None
    weak_areas: list[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @property
    def label(self) -> str:
        """Subject > Topic display label."""
        return f"{self.subject} > {self.topic}"
