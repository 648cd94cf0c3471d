# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Full learner context snapshot."""

from typing import Optional

from pydantic import BaseModel, Field

from src.models.knowledge import KnowledgeEntryResponse
from src.models.profile import SessionPreferencesResponse, UserProfileResponse
from src.models.quiz import QuizRecordResponse, QuizStats
from src.models.study import StudyStats


class LearnerContext(BaseModel):
    """Everything known about the learner of one session."""

    profile: Optional[UserProfileResponse] = None
    preferences: Optional[SessionPreferencesResponse] = None
    knowledge: list[KnowledgeEntryResponse] = Field(default_factory=list)
    weak_areas: list[KnowledgeEntryResponse] = Field(default_factory=list)
    recent_quizzes: list[QuizRecordResponse] = Field(default_factory=list)
    quiz_stats: QuizStats = Field(default_factory=QuizStats)
    study_stats: StudyStats = Field(default_factory=StudyStats)
