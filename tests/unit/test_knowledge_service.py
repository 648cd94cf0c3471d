# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the knowledge and quiz services."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domains.knowledge.service import InvalidResetScopeError, KnowledgeService
from src.domains.quiz.service import InvalidQuizTypeError, QuizService
from src.infrastructure.database.models import KnowledgeEntry, QuizRecord
from src.models.knowledge import KnowledgeUpdate
from src.models.quiz import QuizResultCreate, QuizStats


def create_mock_result(value=None, rows=None, one=None):
    """Create a mock result for scalar, scalars and one() access."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalars.return_value.all.return_value = rows or []
    result.one.return_value = one
    return result


@pytest.fixture
def existing_entry(session_id):
    """Create a stored knowledge entry."""
    return KnowledgeEntry(
        id=7,
        session_id=session_id,
        subject="Math",
        topic="Derivatives",
        mastery=40,
        confidence=70,
        times_studied=2,
        times_quizzed=1,
        weak_areas=["chain rule"],
    )


@pytest.fixture
def refresh_assigns_id(mock_db):
    """Make refresh() assign an id, like a flush would."""

    async def mock_refresh(obj):
        if getattr(obj, "id", None) is None:
            obj.id = 1

    mock_db.refresh.side_effect = mock_refresh
    return mock_db


class TestKnowledgeServiceUpsert:
    """Tests for upsert and record_study."""

    @pytest.mark.asyncio
    async def test_creates_entry_with_defaults(self, refresh_assigns_id, session_id) -> None:
        """Test that a new entry starts at zero and takes the given fields."""
        mock_db = refresh_assigns_id
        mock_db.execute.return_value = create_mock_result(None)
        service = KnowledgeService(mock_db, session_id)

        entry = await service.upsert("Math", "Limits", KnowledgeUpdate(confidence=30))

        mock_db.add.assert_called_once()
        assert entry.subject == "Math"
        assert entry.topic == "Limits"
        assert entry.mastery == 0
        assert entry.confidence == 30
        assert entry.weak_areas == []
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(
        self, refresh_assigns_id, existing_entry, session_id
    ) -> None:
        """Test that None fields keep their stored value."""
        mock_db = refresh_assigns_id
        mock_db.execute.return_value = create_mock_result(existing_entry)
        service = KnowledgeService(mock_db, session_id)

        entry = await service.upsert("Math", "Derivatives", KnowledgeUpdate(mastery=65))

        mock_db.add.assert_not_called()
        assert entry.mastery == 65
        assert entry.confidence == 70
        assert entry.weak_areas == ["chain rule"]

    @pytest.mark.asyncio
    async def test_record_study_increments_count(
        self, refresh_assigns_id, existing_entry, session_id
    ) -> None:
        """Test that a counted study bumps times_studied and last_studied."""
        mock_db = refresh_assigns_id
        mock_db.execute.return_value = create_mock_result(existing_entry)
        service = KnowledgeService(mock_db, session_id)

        entry = await service.record_study(
            "Math", "Derivatives", increment_study_count=True, weak_areas=["a", "a", "b"]
        )

        assert entry.times_studied == 3
        assert entry.last_studied is not None
        assert entry.weak_areas == ["a", "b"]

    @pytest.mark.asyncio
    async def test_mark_studied_without_count(
        self, refresh_assigns_id, existing_entry, session_id
    ) -> None:
        """Test that mark_studied refreshes the date only."""
        mock_db = refresh_assigns_id
        mock_db.execute.return_value = create_mock_result(existing_entry)
        service = KnowledgeService(mock_db, session_id)

        entry = await service.record_study("Math", "Derivatives", mastery=50, mark_studied=True)

        assert entry.times_studied == 2
        assert entry.mastery == 50
        assert entry.last_studied is not None


class TestKnowledgeServiceQuizResult:
    """Tests for apply_quiz_result."""

    @pytest.mark.asyncio
    async def test_new_entry_takes_score(self, refresh_assigns_id, session_id) -> None:
        """Test that the first quiz on a topic sets mastery to the score."""
        mock_db = refresh_assigns_id
        mock_db.execute.return_value = create_mock_result(None)
        service = KnowledgeService(mock_db, session_id)

        entry = await service.apply_quiz_result("Math", "Limits", 80, ["epsilon"])

        assert entry.mastery == 80
        assert entry.times_quizzed == 1
        assert entry.weak_areas == ["epsilon"]
        assert entry.last_quizzed is not None

    @pytest.mark.asyncio
    async def test_existing_entry_blends_and_merges(
        self, refresh_assigns_id, existing_entry, session_id
    ) -> None:
        """Test the 0.7/0.3 blend and the weak area union."""
        mock_db = refresh_assigns_id
        mock_db.execute.return_value = create_mock_result(existing_entry)
        service = KnowledgeService(mock_db, session_id)

        entry = await service.apply_quiz_result(
            "Math", "Derivatives", 100, ["chain rule", "product rule"]
        )

        assert entry.mastery == 58
        assert entry.times_quizzed == 2
        assert entry.weak_areas == ["chain rule", "product rule"]


class TestKnowledgeServiceReset:
    """Tests for reset."""

    @pytest.mark.asyncio
    async def test_invalid_scope_deletes_nothing(self, mock_db, session_id) -> None:
        """Test that an unknown scope raises before any delete."""
        service = KnowledgeService(mock_db, session_id)

        with pytest.raises(InvalidResetScopeError):
            await service.reset("everything")

        mock_db.execute.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scope,deletes", [("knowledge", 1), ("quizzes", 1), ("all", 5)])
    async def test_scope_deletes_tables(self, mock_db, session_id, scope, deletes) -> None:
        """Test the number of tables each scope clears."""
        service = KnowledgeService(mock_db, session_id)

        await service.reset(scope)

        assert mock_db.execute.await_count == deletes
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_quiz_reset_empties_stats(self, mock_db, session_id) -> None:
        """Test that after a quizzes reset the stats aggregate is all zeros."""
        knowledge = KnowledgeService(mock_db, session_id)
        await knowledge.reset("quizzes")

        mock_db.execute.reset_mock()
        mock_db.execute.return_value = create_mock_result(one=(0, None, 0, 0, 0, 0))
        stats = await QuizService(mock_db, session_id, knowledge).stats()

        assert stats == QuizStats()
        assert mock_db.execute.await_count == 1


class TestQuizService:
    """Tests for QuizService."""

    @pytest.mark.asyncio
    async def test_invalid_quiz_type_writes_nothing(self, mock_db, session_id) -> None:
        """Test that an unknown quiz type is rejected up front."""
        service = QuizService(mock_db, session_id)
        result = QuizResultCreate(
            subject="Math", quiz_type="oral", score=50, total_questions=4, correct_answers=2
        )

        with pytest.raises(InvalidQuizTypeError):
            await service.record(result)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_record_with_topic_updates_knowledge(self, mock_db, session_id) -> None:
        """Test that a topic-level quiz is folded into mastery."""

        async def mock_flush():
            mock_db.add.call_args.args[0].id = 12

        mock_db.flush.side_effect = mock_flush
        knowledge = MagicMock()
        knowledge.apply_quiz_result = AsyncMock()
        service = QuizService(mock_db, session_id, knowledge)

        quiz_id = await service.record(
            QuizResultCreate(
                subject="Math",
                topic="Limits",
                quiz_type="mixed",
                score=75,
                total_questions=4,
                correct_answers=3,
                missed_concepts=["squeeze theorem"],
            )
        )

        assert quiz_id == 12
        record = mock_db.add.call_args.args[0]
        assert isinstance(record, QuizRecord)
        assert record.missed_concepts == ["squeeze theorem"]
        knowledge.apply_quiz_result.assert_awaited_once_with(
            subject="Math", topic="Limits", score=75, missed_concepts=["squeeze theorem"]
        )

    @pytest.mark.asyncio
    async def test_record_without_topic_commits(self, mock_db, session_id) -> None:
        """Test that subject-level quizzes leave knowledge alone."""
        knowledge = MagicMock()
        knowledge.apply_quiz_result = AsyncMock()
        service = QuizService(mock_db, session_id, knowledge)

        await service.record(
            QuizResultCreate(
                subject="History",
                quiz_type="free_response",
                score=100,
                total_questions=2,
                correct_answers=2,
            )
        )

        assert mock_db.add.call_args.args[0].missed_concepts is None
        knowledge.apply_quiz_result.assert_not_called()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stats(self, mock_db, session_id) -> None:
        """Test aggregate, recent scores and missed concept ranking."""
        mock_db.execute.side_effect = [
            create_mock_result(one=(3, 72.5, 12, 9, 100, 50)),
            create_mock_result(rows=[100, 67, 50]),
            create_mock_result(rows=[["limits"], ["limits", "series"], None]),
        ]
        service = QuizService(mock_db, session_id)

        stats = await service.stats()

        assert stats.total_quizzes == 3
        assert stats.average_score == 73
        assert stats.total_questions == 12
        assert stats.total_correct == 9
        assert stats.best_score == 100
        assert stats.worst_score == 50
        assert stats.recent_scores == [100, 67, 50]
        assert stats.most_missed_concepts == ["limits", "series"]

    @pytest.mark.asyncio
    async def test_history_maps_records(self, mock_db, session_id) -> None:
        """Test that ledger rows come back as responses, missing concepts as []."""
        rows = [
            QuizRecord(
                id=5,
                session_id=session_id,
                subject="Math",
                topic="Limits",
                quiz_type="mixed",
                score=75,
                total_questions=4,
                correct_answers=3,
                missed_concepts=None,
                hints_used=1,
            ),
            QuizRecord(
                id=4,
                session_id=session_id,
                subject="Math",
                quiz_type="multiple_choice",
                score=50,
                total_questions=2,
                correct_answers=1,
                missed_concepts=["series"],
                hints_used=0,
            ),
        ]
        mock_db.execute.return_value = create_mock_result(rows=rows)
        service = QuizService(mock_db, session_id)

        history = await service.history(subject="Math", limit=2)

        assert [h.id for h in history] == [5, 4]
        assert history[0].missed_concepts == []
        assert history[1].missed_concepts == ["series"]
        assert history[1].topic is None

    @pytest.mark.asyncio
    async def test_stats_empty_ledger(self, mock_db, session_id) -> None:
        """Test that an empty ledger yields zeros without further queries."""
        mock_db.execute.return_value = create_mock_result(one=(0, None, 0, 0, 0, 0))
        service = QuizService(mock_db, session_id)

        stats = await service.stats()

        assert stats == QuizStats()
        assert mock_db.execute.await_count == 1
