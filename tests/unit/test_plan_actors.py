# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the plan continuation actors and their middleware.

DRAMATIQ_TEST_MODE is set in conftest, so the actors bind to a StubBroker.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from dramatiq import Message

from src.infrastructure.background.broker import Queues, get_broker
from src.infrastructure.database.connection import DatabaseError
from src.infrastructure.background.middleware import (
    PlanRecoveryMiddleware,
    SessionContextMiddleware,
    get_current_session,
)
from src.infrastructure.background.tasks.plan_steps import (
    DramatiqContinuationQueue,
    execute_plan_step,
    get_plan_actors,
    resume_active_plans,
    resume_plan,
)


@pytest.fixture
def stub_broker():
    """Get the stub broker with empty queues."""
    broker = get_broker()
    broker.flush_all()
    yield broker
    broker.flush_all()


def make_message(args=(), options=None) -> Message:
    """Create a plan continuation message."""
    return Message(
        queue_name=Queues.PLANS,
        actor_name="execute_plan_step",
        args=args,
        kwargs={},
        options=options or {},
    )


class TestDramatiqContinuationQueue:
    """Tests for DramatiqContinuationQueue."""

    def test_enqueue_sends_continuation(self, stub_broker) -> None:
        """Test that a continuation lands on the plans queue immediately."""
        DramatiqContinuationQueue().enqueue("session-1", 2)

        queue = stub_broker.queues[Queues.PLANS]
        assert queue.qsize() == 1
        message = Message.decode(queue.get_nowait())
        assert message.actor_name == "execute_plan_step"
        assert message.args == ("session-1", 2)
        assert message.options["session_id"] == "session-1"

    def test_actors_registered_on_plans_queue(self) -> None:
        """Test actor routing."""
        assert [actor.actor_name for actor in get_plan_actors()] == [
            "execute_plan_step",
            "resume_plan",
            "resume_active_plans",
        ]
        assert execute_plan_step.queue_name == Queues.PLANS

    def test_continuations_retry_with_backoff(self) -> None:
        """Test that infrastructure failures are retried a bounded number of times."""
        for actor in get_plan_actors():
            assert actor.options["max_retries"] == 3
            assert actor.options["min_backoff"] < actor.options["max_backoff"]


class TestPlanActors:
    """Tests for the actor bodies."""

    def test_execute_plan_step_runs_one_continuation(self) -> None:
        """Test that the actor drives the scheduler for one step."""
        scheduler = MagicMock()
        scheduler.run_step = AsyncMock()
        with patch(
            "src.infrastructure.background.tasks.plan_steps._build_scheduler",
            return_value=scheduler,
        ):
            execute_plan_step("session-1", 1)

        scheduler.run_step.assert_awaited_once_with("session-1", 1)

    def test_resume_plan_resumes_session(self) -> None:
        """Test that resume_plan asks the scheduler to re-enqueue."""
        scheduler = MagicMock()
        scheduler.resume = AsyncMock()
        with patch(
            "src.infrastructure.background.tasks.plan_steps._build_scheduler",
            return_value=scheduler,
        ):
            resume_plan("session-1")

        scheduler.resume.assert_awaited_once_with("session-1")

    def test_resume_active_plans_resumes_all(self) -> None:
        """Test that every plan in progress is resumed once the database answers."""
        scheduler = MagicMock()
        scheduler.resume_all = AsyncMock(return_value=2)
        manager = MagicMock()
        manager.check_connection = AsyncMock(return_value=True)
        with (
            patch(
                "src.infrastructure.background.tasks.plan_steps._build_scheduler",
                return_value=scheduler,
            ),
            patch(
                "src.infrastructure.database.connection.get_worker_db_manager",
                return_value=manager,
            ),
        ):
            resume_active_plans()

        scheduler.resume_all.assert_awaited_once_with()

    def test_resume_active_plans_waits_for_database(self) -> None:
        """Test that an unreachable database fails the actor so it is retried."""
        scheduler = MagicMock()
        scheduler.resume_all = AsyncMock()
        manager = MagicMock()
        manager.check_connection = AsyncMock(return_value=False)
        with (
            patch(
                "src.infrastructure.background.tasks.plan_steps._build_scheduler",
                return_value=scheduler,
            ),
            patch(
                "src.infrastructure.database.connection.get_worker_db_manager",
                return_value=manager,
            ),
        ):
            with pytest.raises(DatabaseError):
                resume_active_plans()

        scheduler.resume_all.assert_not_called()


class TestPlanRecoveryMiddleware:
    """Tests for PlanRecoveryMiddleware."""

    def test_registered_on_broker(self, stub_broker) -> None:
        """Test that the broker runs recovery on worker boot."""
        assert any(isinstance(m, PlanRecoveryMiddleware) for m in stub_broker.middleware)

    def test_worker_boot_sends_recovery(self, stub_broker) -> None:
        """Test that a booting worker schedules resume_active_plans."""
        PlanRecoveryMiddleware().after_worker_boot(stub_broker, MagicMock())

        queue = stub_broker.queues[Queues.PLANS]
        assert queue.qsize() == 1
        message = Message.decode(queue.get_nowait())
        assert message.actor_name == "resume_active_plans"
        assert message.args == ()


class TestSessionContextMiddleware:
    """Tests for SessionContextMiddleware."""

    def test_session_taken_from_first_argument(self) -> None:
        """Test that the first positional argument names the session."""
        message = make_message(args=("session-9", 0))

        SessionContextMiddleware().before_enqueue(MagicMock(), message, None)

        assert message.options["session_id"] == "session-9"

    def test_existing_option_kept(self) -> None:
        """Test that an explicit option is not overwritten."""
        message = make_message(args=("other", 0), options={"session_id": "session-1"})

        SessionContextMiddleware().before_enqueue(MagicMock(), message, None)

        assert message.options["session_id"] == "session-1"

    def test_context_set_and_cleared(self) -> None:
        """Test that the session is visible only while the message runs."""
        middleware = SessionContextMiddleware()
        message = make_message(args=("session-3", 0), options={"session_id": "session-3"})

        middleware.before_process_message(MagicMock(), message)
        assert get_current_session() == "session-3"

        middleware.after_process_message(MagicMock(), message)
        assert get_current_session() is None
