# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Persisted plan progress for the step scheduler."""

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin
from src.infrastructure.database.models.learner import SESSION_ID_LENGTH


class PlanSessionRecord(Base, TimestampMixin):
    """The one active plan of a session.

    results always has the same length as steps. completed_steps counts
    the filled result slots, which are filled left to right. The row is
    deleted once the plan has been combined.
    """

    __tablename__ = "plan_sessions"

    session_id: Mapped[str] = mapped_column(String(SESSION_ID_LENGTH), primary_key=True)
    original_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    steps: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    results: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    completed_steps: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    processing: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
