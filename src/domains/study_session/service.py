# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Study session service.

Tracks blocks of study time. A session is started with a type and an
optional subject/topic, and ended with an optional summary; its duration
is counted in whole minutes.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import StudySession
from src.models.study import (
    SessionType,
    SessionTypeStats,
    StudySessionResponse,
    StudyStats,
)
from src.utils.datetime import utc_now, whole_minutes_between

logger = logging.getLogger(__name__)

RECENT_SESSIONS = 5


class StudySessionError(Exception):
    """Base exception for study session errors."""

    pass


class InvalidSessionTypeError(StudySessionError):
    """Raised when a session type is not learn/review/quiz/exam_prep."""

    pass


class StudySessionNotFoundError(StudySessionError):
    """Raised when a study session does not exist in this session."""

    pass


class StudySessionService:
    """Service for the study sessions of one chat session.

    Attributes:
        _db: Async database session.
        _session_id: Chat session owning the study sessions.
    """

    def __init__(self, db: AsyncSession, session_id: str) -> None:
        self._db = db
        self._session_id = session_id

    async def start(
        self,
        session_type: str,
        subject: Optional[str] = None,
        topic: Optional[str] = None,
    ) -> int:
        """Start a study session.

        Returns:
            ID of the new study session.

        Raises:
            InvalidSessionTypeError: If session_type is unknown.
        """
        try:
            parsed_type = SessionType(session_type)
        except ValueError as e:
            valid = ", ".join(t.value for t in SessionType)
            raise InvalidSessionTypeError(
                f"Invalid session_type: {session_type}. Must be one of: {valid}"
            ) from e

        study_session = StudySession(
            session_id=self._session_id,
            session_type=parsed_type.value,
            subject=subject,
            topic=topic,
            started_at=utc_now(),
        )
        self._db.add(study_session)
        await self._db.commit()
        await self._db.refresh(study_session)

        logger.info(
            "Study session started: session=%s, id=%s, type=%s",
            self._session_id,
            study_session.id,
            parsed_type.value,
        )
        return study_session.id

    async def end(self, study_session_id: int, summary: Optional[str] = None) -> StudySessionResponse:
        """End a study session and record its duration.

        Raises:
            StudySessionNotFoundError: If the id is unknown for this session.
        """
        result = await self._db.execute(
            select(StudySession).where(
                StudySession.id == study_session_id,
                StudySession.session_id == self._session_id,
            )
        )
        study_session = result.scalar_one_or_none()
        if study_session is None:
            raise StudySessionNotFoundError(f"Study session {study_session_id} not found")

        ended_at = utc_now()
        study_session.ended_at = ended_at
        study_session.duration_minutes = whole_minutes_between(study_session.started_at, ended_at)
        if summary is not None:
            study_session.summary = summary

        await self._db.commit()
        await self._db.refresh(study_session)

        logger.info(
            "Study session ended: session=%s, id=%s, minutes=%d",
            self._session_id,
            study_session_id,
            study_session.duration_minutes,
        )
        return StudySessionResponse.model_validate(study_session)

    async def stats(self) -> StudyStats:
        """Aggregate ended sessions by type and list the most recent sessions."""
        by_type_query = (
            select(
                StudySession.session_type,
                func.count(StudySession.id),
                func.coalesce(func.sum(StudySession.duration_minutes), 0),
            )
            .where(
                StudySession.session_id == self._session_id,
                StudySession.ended_at.is_not(None),
            )
            .group_by(StudySession.session_type)
        )
        rows = (await self._db.execute(by_type_query)).all()

        sessions_by_type = {
            session_type: SessionTypeStats(count=count, total_minutes=minutes)
            for session_type, count, minutes in rows
        }

        recent_query = (
            select(StudySession)
            .where(StudySession.session_id == self._session_id)
            .order_by(StudySession.started_at.desc(), StudySession.id.desc())
            .limit(RECENT_SESSIONS)
        )
        recent = (await self._db.execute(recent_query)).scalars().all()

        return StudyStats(
            total_minutes=sum(s.total_minutes for s in sessions_by_type.values()),
            sessions_by_type=sessions_by_type,
            recent_sessions=[StudySessionResponse.model_validate(s) for s in recent],
        )
