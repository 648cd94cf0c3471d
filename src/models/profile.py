# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner profile and session preference schemas.

Enumerated fields of the update requests are accepted as plain strings;
ProfileService validates them against the enums below before writing so
that an invalid value rejects the whole update.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Goal(str, Enum):
    """What the learner wants to do in a session."""

    LEARN = "learn"
    EXAM = "exam"
    QUIZ = "quiz"


class LearningMethod(str, Enum):
    """Preferred ways of learning."""

    EXAMPLES = "examples"
    THEORY = "theory"
    PRACTICE = "practice"
    FLASHCARDS = "flashcards"
    SUMMARIES = "summaries"
    SOCRATIC = "socratic"


class ExamDepth(str, Enum):
    """How deep exam preparation should go."""

    OVERVIEW = "overview"
    MODERATE = "moderate"
    DEEP = "deep"


class UserProfileUpdate(BaseModel):
    """Partial profile update. Fields left as None are not touched."""

    name: Optional[str] = Field(default=None, max_length=200)
    major: Optional[str] = Field(default=None, max_length=200)
    year: Optional[str] = Field(default=None, max_length=50)
    preferred_learning_methods: Optional[list[str]] = None

    def provided_fields(self) -> dict[str, object]:
        """Get the fields that carry a value, in declaration order."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class UserProfileResponse(BaseModel):
    """Stored learner profile."""

    model_config = ConfigDict(from_attributes=True)

    session_id: str
    name: Optional[str] = None
    major: Optional[str] = None
    year: Optional[str] = None
    preferred_learning_methods: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    last_active: Optional[datetime] = None

    @field_validator("preferred_learning_methods", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def missing_fields(self) -> list[str]:
        """Names of profile fields that are still blank."""
        missing = [
            name
            for name in ("name", "major", "year")
            if not (getattr(self, name) or "").strip()
        ]
        if not self.preferred_learning_methods:
            missing.append("preferred_learning_methods")
        return missing


class SessionPreferencesUpdate(BaseModel):
    """Partial session preference update. Fields left as None are not touched."""

    goal: Optional[str] = None
    learn_topic: Optional[str] = None
    learn_concept: Optional[str] = None
    exam_name: Optional[str] = None
    exam_depth: Optional[str] = None
    exam_time_left: Optional[str] = None
    quiz_topic: Optional[str] = None
    quiz_num_questions: Optional[int] = Field(default=None, ge=1)
    quiz_type: Optional[str] = None
    quiz_hints_allowed: Optional[bool] = None
    onboarding_complete: Optional[bool] = None


class SessionPreferencesResponse(BaseModel):
    """Stored session preferences."""

    model_config = ConfigDict(from_attributes=True)

    session_id: str
    goal: Optional[str] = None
    learn_topic: Optional[str] = None
    learn_concept: Optional[str] = None
    exam_name: Optional[str] = None
    exam_depth: Optional[str] = None
    exam_time_left: Optional[str] = None
    quiz_topic: Optional[str] = None
    quiz_num_questions: Optional[int] = None
    quiz_type: Optional[str] = None
    quiz_hints_allowed: Optional[bool] = None
    onboarding_complete: bool = False
