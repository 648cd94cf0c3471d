# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz service for the append-only quiz ledger.

This module provides the QuizService that handles:
- Recording quiz results (and folding them into knowledge mastery)
- Quiz history
- Aggregate quiz statistics

Example:
    >>> service = QuizService(db, session_id="abc")
    >>> quiz_id = await service.record(QuizResultCreate(...))
    >>> stats = await service.stats(subject="Math")
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.knowledge.scoring import round_half_up
from src.domains.knowledge.service import KnowledgeService
from src.domains.quiz.stats import (
    MISSED_CONCEPT_WINDOW,
    RECENT_SCORES,
    rank_missed_concepts,
)
from src.infrastructure.database.models import QuizRecord
from src.models.quiz import QuizRecordResponse, QuizResultCreate, QuizStats, QuizType

logger = logging.getLogger(__name__)


class QuizServiceError(Exception):
    """Base exception for quiz service errors."""

    pass


class InvalidQuizTypeError(QuizServiceError):
    """Raised when a quiz type is not multiple_choice/free_response/mixed."""

    pass


def validate_quiz_type(quiz_type: str) -> QuizType:
    """Parse a quiz type.

    Raises:
        InvalidQuizTypeError: If the value is not a known quiz type.
    """
    try:
        return QuizType(quiz_type)
    except ValueError as e:
        valid = ", ".join(t.value for t in QuizType)
        raise InvalidQuizTypeError(
            f"Invalid quiz_type: {quiz_type}. Must be one of: {valid}"
        ) from e


class QuizService:
    """Service for the quiz ledger of one session.

    Ledger entries are never updated; they are only removed by a scoped
    reset (see KnowledgeService.reset).

    Attributes:
        _db: Async database session.
        _session_id: Session whose ledger is read and written.
        _knowledge: Knowledge service receiving topic-level quiz results.
    """

    def __init__(
        self,
        db: AsyncSession,
        session_id: str,
        knowledge: Optional[KnowledgeService] = None,
    ) -> None:
        self._db = db
        self._session_id = session_id
        self._knowledge = knowledge or KnowledgeService(db, session_id)

    async def record(self, result: QuizResultCreate) -> int:
        """Append a quiz result to the ledger.

        When the result names a topic, the knowledge entry for
        (subject, topic) is updated with the quiz-driven mastery rule.

        Args:
            result: The finished quiz.

        Returns:
            ID of the new ledger entry.

        Raises:
            InvalidQuizTypeError: If quiz_type is unknown. Nothing is written.
        """
        quiz_type = validate_quiz_type(result.quiz_type)

        record = QuizRecord(
            session_id=self._session_id,
            subject=result.subject,
            topic=result.topic,
            quiz_type=quiz_type.value,
            score=result.score,
            total_questions=result.total_questions,
            correct_answers=result.correct_answers,
            missed_concepts=list(result.missed_concepts) or None,
            time_spent_seconds=result.time_spent_seconds,
            hints_used=result.hints_used,
        )
        self._db.add(record)
        await self._db.flush()

        if result.topic:
            # Commits the ledger entry together with the knowledge write
            await self._knowledge.apply_quiz_result(
                subject=result.subject,
                topic=result.topic,
                score=result.score,
                missed_concepts=result.missed_concepts,
            )
        else:
            await self._db.commit()

        logger.info(
            "Quiz recorded: session=%s, id=%s, subject=%s, score=%d",
            self._session_id,
            record.id,
            result.subject,
            result.score,
        )
        return record.id

    async def history(
        self,
        subject: Optional[str] = None,
        limit: int = 20,
    ) -> list[QuizRecordResponse]:
        """List ledger entries, newest first."""
        query = (
            self._scoped(select(QuizRecord), subject)
            .order_by(QuizRecord.quiz_date.desc(), QuizRecord.id.desc())
            .limit(limit)
        )
        result = await self._db.execute(query)
        return [QuizRecordResponse.model_validate(r) for r in result.scalars().all()]

    async def stats(self, subject: Optional[str] = None) -> QuizStats:
        """Aggregate the ledger.

        Returns:
            Count, rounded mean score, question/correct sums, best and worst
            score, the last 5 scores (newest first) and the 5 most missed
            concepts over the last 10 entries that have missed concepts.
            An empty ledger yields all zeros.
        """
        aggregate_query = self._scoped(
            select(
                func.count(QuizRecord.id),
                func.avg(QuizRecord.score),
                func.coalesce(func.sum(QuizRecord.total_questions), 0),
                func.coalesce(func.sum(QuizRecord.correct_answers), 0),
                func.coalesce(func.max(QuizRecord.score), 0),
                func.coalesce(func.min(QuizRecord.score), 0),
            ),
            subject,
        )
        total, average, questions, correct, best, worst = (
            await self._db.execute(aggregate_query)
        ).one()

        if not total:
            return QuizStats()

        recent_query = (
            self._scoped(select(QuizRecord.score), subject)
            .order_by(QuizRecord.quiz_date.desc(), QuizRecord.id.desc())
            .limit(RECENT_SCORES)
        )
        recent_scores = (await self._db.execute(recent_query)).scalars().all()

        missed_query = (
            self._scoped(select(QuizRecord.missed_concepts), subject)
            .where(QuizRecord.missed_concepts.is_not(None))
            .order_by(QuizRecord.quiz_date.desc(), QuizRecord.id.desc())
            .limit(MISSED_CONCEPT_WINDOW)
        )
        missed_rows = (await self._db.execute(missed_query)).scalars().all()

        return QuizStats(
            total_quizzes=total,
            average_score=round_half_up(average or 0),
            total_questions=questions,
            total_correct=correct,
            best_score=best,
            worst_score=worst,
            recent_scores=list(recent_scores),
            most_missed_concepts=rank_missed_concepts(row or [] for row in missed_rows),
        )

    def _scoped(self, query, subject: Optional[str]):
        query = query.where(QuizRecord.session_id == self._session_id)
        if subject is not None:
            query = query.where(QuizRecord.subject == subject)
        return query
