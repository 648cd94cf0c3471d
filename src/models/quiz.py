# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz ledger and statistics schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuizType(str, Enum):
    """Kind of questions in a quiz."""

    MULTIPLE_CHOICE = "multiple_choice"
    FREE_RESPONSE = "free_response"
    MIXED = "mixed"


class QuizResultCreate(BaseModel):
    """A finished quiz to append to the ledger.

    quiz_type is validated by QuizService so that an unknown type is
    reported as InvalidQuizTypeError before anything is written.
    """

    subject: str = Field(..., min_length=1, max_length=200)
    topic: Optional[str] = Field(default=None, max_length=300)
    quiz_type: str
    score: int = Field(..., ge=0, le=100)
    total_questions: int = Field(..., ge=0)
    correct_answers: int = Field(..., ge=0)
    missed_concepts: list[str] = Field(default_factory=list)
    time_spent_seconds: Optional[int] = Field(default=None, ge=0)
    hints_used: int = Field(default=0, ge=0)


class QuizRecordResponse(BaseModel):
    """Stored ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    subject: str
    topic: Optional[str] = None
    quiz_type: str
    score: int
    total_questions: int
    correct_answers: int
    missed_concepts: list[str] = Field(default_factory=list)
    time_spent_seconds: Optional[int] = None
    hints_used: int = 0
    quiz_date: Optional[datetime] = None

    @field_validator("missed_concepts", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return [] if value is None else value


class QuizStats(BaseModel):
    """Aggregate over the quiz ledger. All zero for an empty ledger."""

    total_quizzes: int = 0
    average_score: int = 0
    total_questions: int = 0
    total_correct: int = 0
    best_score: int = 0
    worst_score: int = 0
    recent_scores: list[int] = Field(default_factory=list)
    most_missed_concepts: list[str] = Field(default_factory=list)
