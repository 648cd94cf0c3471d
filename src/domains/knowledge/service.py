# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Knowledge service for per-session mastery tracking.

This module provides the KnowledgeService that handles:
- Upserting (subject, topic) entries
- Listing entries and weak areas
- Applying quiz results to mastery
- Scoped progress resets

Example:
    >>> service = KnowledgeService(db, session_id="abc")
    >>> await service.apply_quiz_result("Math", "Derivatives", score=80, missed_concepts=[])
    >>> weak = await service.get_weak(limit=5)
"""

import logging
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.knowledge.scoring import (
    WEAK_CONFIDENCE_THRESHOLD,
    WEAK_MASTERY_THRESHOLD,
    merge_weak_areas,
    quiz_mastery,
)
from src.infrastructure.database.models import (
    KnowledgeEntry,
    QuizRecord,
    SessionPreferences,
    StudySession,
    UserProfile,
)
from src.models.knowledge import KnowledgeEntryResponse, KnowledgeUpdate, ResetScope
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_RESET_TABLES = {
    ResetScope.KNOWLEDGE: (KnowledgeEntry,),
    ResetScope.QUIZZES: (QuizRecord,),
    ResetScope.SESSIONS: (StudySession,),
    ResetScope.ALL: (KnowledgeEntry, QuizRecord, StudySession, UserProfile, SessionPreferences),
}


class KnowledgeServiceError(Exception):
    """Base exception for knowledge service errors."""

    pass


class InvalidResetScopeError(KnowledgeServiceError):
    """Raised when a reset scope is not one of all/knowledge/quizzes/sessions."""

    pass


class KnowledgeService:
    """Service for the knowledge entries of one session.

    Attributes:
        _db: Async database session.
        _session_id: Session whose entries are read and written.
    """

    def __init__(self, db: AsyncSession, session_id: str) -> None:
        """Initialize the knowledge service.

        Args:
            db: Async database session.
            session_id: Session whose entries are read and written.
        """
        self._db = db
        self._session_id = session_id

    async def upsert(
        self,
        subject: str,
        topic: str,
        update: KnowledgeUpdate,
    ) -> KnowledgeEntryResponse:
        """Create or partially update the entry for (subject, topic).

        Args:
            subject: Subject area.
            topic: Topic within the subject.
            update: Fields to write.

        Returns:
            The stored entry.
        """
        entry = await self._get_entry(subject, topic)
        return await self._write(entry, subject, topic, update)

    async def get(self, subject: Optional[str] = None) -> list[KnowledgeEntryResponse]:
        """List entries.

        Without a subject, entries are ordered most recently studied first
        (never-studied entries last). With a subject, they are ordered by topic.
        """
        query = select(KnowledgeEntry).where(KnowledgeEntry.session_id == self._session_id)
        if subject is not None:
            query = query.where(KnowledgeEntry.subject == subject).order_by(
                KnowledgeEntry.topic.asc()
            )
        else:
            query = query.order_by(
                KnowledgeEntry.last_studied.desc().nulls_last(),
                KnowledgeEntry.id.asc(),
            )

        result = await self._db.execute(query)
        return [KnowledgeEntryResponse.model_validate(e) for e in result.scalars().all()]

    async def get_topic(self, subject: str, topic: str) -> Optional[KnowledgeEntryResponse]:
        """Get one entry, or None."""
        entry = await self._get_entry(subject, topic)
        return KnowledgeEntryResponse.model_validate(entry) if entry else None

    async def get_weak(self, limit: int = 10) -> list[KnowledgeEntryResponse]:
        """List entries that need review, weakest first.

        An entry is weak when mastery < 60 or confidence < 50. Entries are
        ordered by mastery, then confidence, ascending.
        """
        query = (
            select(KnowledgeEntry)
            .where(
                KnowledgeEntry.session_id == self._session_id,
                or_(
                    KnowledgeEntry.mastery < WEAK_MASTERY_THRESHOLD,
                    KnowledgeEntry.confidence < WEAK_CONFIDENCE_THRESHOLD,
                ),
            )
            .order_by(
                KnowledgeEntry.mastery.asc(),
                KnowledgeEntry.confidence.asc(),
                KnowledgeEntry.id.asc(),
            )
            .limit(limit)
        )
        result = await self._db.execute(query)
        return [KnowledgeEntryResponse.model_validate(e) for e in result.scalars().all()]

    async def record_study(
        self,
        subject: str,
        topic: str,
        mastery: Optional[int] = None,
        confidence: Optional[int] = None,
        increment_study_count: bool = False,
        weak_areas: Optional[list[str]] = None,
        notes: Optional[str] = None,
        mark_studied: bool = False,
    ) -> KnowledgeEntryResponse:
        """Record that the learner studied a topic.

        Args:
            subject: Subject area.
            topic: Topic within the subject.
            mastery: New mastery level, if known.
            confidence: New confidence level, if known.
            increment_study_count: Add one to times_studied and refresh last_studied.
            weak_areas: Replacement weak area list.
            notes: Free-text observations.
            mark_studied: Refresh last_studied without counting a study.

        Returns:
            The stored entry.
        """
        entry = await self._get_entry(subject, topic)

        times_studied = None
        if increment_study_count:
            times_studied = (entry.times_studied if entry else 0) + 1

        update = KnowledgeUpdate(
            mastery=mastery,
            confidence=confidence,
            times_studied=times_studied,
            mark_studied=mark_studied or increment_study_count,
            weak_areas=weak_areas,
            notes=notes,
        )
        return await self._write(entry, subject, topic, update)

    async def apply_quiz_result(
        self,
        subject: str,
        topic: str,
        score: int,
        missed_concepts: list[str],
    ) -> KnowledgeEntryResponse:
        """Fold a quiz score into the entry for (subject, topic).

        A new entry takes the score as its mastery. An existing one moves to
        round(prior * 0.7 + score * 0.3). Missed concepts are merged into the
        weak areas, and times_quizzed/last_quizzed are updated.

        Returns:
            The stored entry.
        """
        entry = await self._get_entry(subject, topic)

        prior_weak = (entry.weak_areas or []) if entry else []
        update = KnowledgeUpdate(
            mastery=quiz_mastery(entry.mastery if entry else None, score),
            times_quizzed=(entry.times_quizzed if entry else 0) + 1,
            mark_quizzed=True,
            weak_areas=merge_weak_areas(prior_weak, missed_concepts),
        )

        logger.info(
            "Applying quiz result: session=%s, %s > %s, score=%d, mastery=%s->%d",
            self._session_id,
            subject,
            topic,
            score,
            entry.mastery if entry else None,
            update.mastery,
        )
        return await self._write(entry, subject, topic, update)

    async def reset(self, scope: str) -> None:
        """Delete learner data of this session.

        Scopes: knowledge (entries), quizzes (ledger), sessions (study
        sessions), all (the above plus profile and preferences).

        Raises:
            InvalidResetScopeError: If scope is unknown. Nothing is deleted.
        """
        try:
            reset_scope = ResetScope(scope)
        except ValueError as e:
            valid = ", ".join(s.value for s in ResetScope)
            raise InvalidResetScopeError(
                f"Invalid reset scope: {scope}. Must be one of: {valid}"
            ) from e

        for model in _RESET_TABLES[reset_scope]:
            await self._db.execute(delete(model).where(model.session_id == self._session_id))
        await self._db.commit()

        logger.info("Progress reset: session=%s, scope=%s", self._session_id, reset_scope.value)

    async def _get_entry(self, subject: str, topic: str) -> Optional[KnowledgeEntry]:
        result = await self._db.execute(
            select(KnowledgeEntry).where(
                KnowledgeEntry.session_id == self._session_id,
                KnowledgeEntry.subject == subject,
                KnowledgeEntry.topic == topic,
            )
        )
        return result.scalar_one_or_none()

    async def _write(
        self,
        entry: Optional[KnowledgeEntry],
        subject: str,
        topic: str,
        update: KnowledgeUpdate,
    ) -> KnowledgeEntryResponse:
        now = utc_now()

        if entry is None:
            entry = KnowledgeEntry(
                session_id=self._session_id,
                subject=subject,
                topic=topic,
                mastery=0,
                confidence=0,
                times_studied=0,
                times_quizzed=0,
                weak_areas=[],
            )
            self._db.add(entry)

        if update.mastery is not None:
            entry.mastery = update.mastery
        if update.confidence is not None:
            entry.confidence = update.confidence
        if update.times_studied is not None:
            entry.times_studied = update.times_studied
        if update.times_quizzed is not None:
            entry.times_quizzed = update.times_quizzed
        if update.weak_areas is not None:
            # Reassigned, not mutated, so the JSON column is marked dirty
            entry.weak_areas = merge_weak_areas([], update.weak_areas)
        if update.notes is not None:
            entry.notes = update.notes
        if update.mark_studied:
            entry.last_studied = now
        if update.mark_quizzed:
            entry.last_quizzed = now

        try:
            await self._db.commit()
        except SQLAlchemyError:
            await self._db.rollback()
            raise
        await self._db.refresh(entry)

        return KnowledgeEntryResponse.model_validate(entry)
