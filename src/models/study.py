# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Study session schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionType(str, Enum):
    """Kind of study session."""

    LEARN = "learn"
    REVIEW = "review"
    QUIZ = "quiz"
    EXAM_PREP = "exam_prep"


class StudySessionResponse(BaseModel):
    """Stored study session."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    session_type: str
    subject: Optional[str] = None
    topic: Optional[str] = None
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    summary: Optional[str] = None


class SessionTypeStats(BaseModel):
    """Count and minutes of ended sessions of one type."""

    count: int = 0
    total_minutes: int = 0


class StudyStats(BaseModel):
    """Aggregate over study sessions."""

    total_minutes: int = 0
    sessions_by_type: dict[str, SessionTypeStats] = Field(default_factory=dict)
    recent_sessions: list[StudySessionResponse] = Field(default_factory=list)
