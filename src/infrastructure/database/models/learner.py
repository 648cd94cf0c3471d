# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner state tables: profile, preferences, knowledge, quizzes, study sessions.

Every table is scoped by session_id; no row is shared between sessions.
Enumerated columns are plain strings guarded by CHECK constraints; the
services validate them before writing.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin

SESSION_ID_LENGTH = 64


class UserProfile(Base):
    """Who the learner is. One row per session."""

    __tablename__ = "user_profiles"

    session_id: Mapped[str] = mapped_column(String(SESSION_ID_LENGTH), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(200))
    major: Mapped[Optional[str]] = mapped_column(String(200))
    year: Mapped[Optional[str]] = mapped_column(String(50))
    preferred_learning_methods: Mapped[Optional[list[str]]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    last_active: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class SessionPreferences(Base, TimestampMixin):
    """What the learner wants to do in this session. One row per session."""

    __tablename__ = "session_preferences"
    __table_args__ = (
        CheckConstraint("goal IN ('learn', 'exam', 'quiz')", name="ck_prefs_goal"),
        CheckConstraint(
            "exam_depth IN ('overview', 'moderate', 'deep')", name="ck_prefs_exam_depth"
        ),
        CheckConstraint(
            "quiz_type IN ('multiple_choice', 'free_response', 'mixed')",
            name="ck_prefs_quiz_type",
        ),
    )

    session_id: Mapped[str] = mapped_column(String(SESSION_ID_LENGTH), primary_key=True)
    goal: Mapped[Optional[str]] = mapped_column(String(20))
    learn_topic: Mapped[Optional[str]] = mapped_column(String(300))
    learn_concept: Mapped[Optional[str]] = mapped_column(String(300))
    exam_name: Mapped[Optional[str]] = mapped_column(String(300))
    exam_depth: Mapped[Optional[str]] = mapped_column(String(20))
    exam_time_left: Mapped[Optional[str]] = mapped_column(String(100))
    quiz_topic: Mapped[Optional[str]] = mapped_column(String(300))
    quiz_num_questions: Mapped[Optional[int]] = mapped_column(Integer)
    quiz_type: Mapped[Optional[str]] = mapped_column(String(20))
    quiz_hints_allowed: Mapped[Optional[bool]] = mapped_column(Boolean)
    onboarding_complete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class KnowledgeEntry(Base, TimestampMixin):
    """Mastery of one (subject, topic) pair."""

    __tablename__ = "knowledge_entries"
    __table_args__ = (
        UniqueConstraint("session_id", "subject", "topic", name="uq_knowledge_topic"),
        CheckConstraint("mastery >= 0 AND mastery <= 100", name="ck_knowledge_mastery"),
        CheckConstraint(
            "confidence >= 0 AND confidence <= 100", name="ck_knowledge_confidence"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(SESSION_ID_LENGTH), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    topic: Mapped[str] = mapped_column(String(300), nullable=False)
    mastery: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    confidence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    times_studied: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    times_quizzed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_studied: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_quizzed: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    weak_areas: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)


class QuizRecord(Base):
    """Append-only quiz ledger entry. Never updated once written."""

    __tablename__ = "quiz_records"
    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= 100", name="ck_quiz_score"),
        CheckConstraint(
            "quiz_type IN ('multiple_choice', 'free_response', 'mixed')",
            name="ck_quiz_type",
        ),
        Index("ix_quiz_records_session_subject", "session_id", "subject"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(SESSION_ID_LENGTH), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    topic: Mapped[Optional[str]] = mapped_column(String(300))
    quiz_type: Mapped[str] = mapped_column(String(20), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False)
    # NULL when nothing was missed
    missed_concepts: Mapped[Optional[list[str]]] = mapped_column(JSON(none_as_null=True))
    time_spent_seconds: Mapped[Optional[int]] = mapped_column(Integer)
    hints_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    quiz_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class StudySession(Base):
    """A tracked block of study time."""

    __tablename__ = "study_sessions"
    __table_args__ = (
        CheckConstraint(
            "session_type IN ('learn', 'review', 'quiz', 'exam_prep')",
            name="ck_study_session_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(SESSION_ID_LENGTH), nullable=False, index=True)
    session_type: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[Optional[str]] = mapped_column(String(200))
    topic: Mapped[Optional[str]] = mapped_column(String(300))
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer)
    summary: Mapped[Optional[str]] = mapped_column(Text)

    @property
    def is_ended(self) -> bool:
        """Check if the session has been ended."""
        return self.ended_at is not None
