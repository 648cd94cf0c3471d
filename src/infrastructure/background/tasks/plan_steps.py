# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Plan continuation actors.

execute_plan_step runs one continuation of a plan: one step, or the
combine phase once every step has a result. It re-enqueues itself for the
next step through DramatiqContinuationQueue, so a plan survives worker
restarts; resume_plan re-enqueues the continuation of a plan whose
message was lost, and resume_active_plans does so for every plan in
progress when a worker boots.

Step failures never escape a continuation; what does escape is an
infrastructure error, such as the database being unreachable. Those are
retried with backoff, and a retried continuation whose step was already
saved is dropped by the cursor check.
"""

import logging

import dramatiq

from src.infrastructure.background.broker import Priority, Queues, setup_dramatiq
from src.infrastructure.background.tasks.base import run_async

# Setup broker before defining actors
setup_dramatiq()

logger = logging.getLogger(__name__)


class DramatiqContinuationQueue:
    """ContinuationQueue backed by the execute_plan_step actor."""

    def enqueue(self, session_id: str, step_index: int) -> None:
        execute_plan_step.send_with_options(args=(session_id, step_index), delay=0)
        logger.debug("Plan continuation enqueued: session=%s, index=%d", session_id, step_index)


def _build_scheduler():
    from src.core.orchestration import create_plan_scheduler
    from src.infrastructure.database.connection import get_worker_db_manager

    return create_plan_scheduler(
        session_factory=get_worker_db_manager().get_session,
        queue=DramatiqContinuationQueue(),
    )


# Redelivery is safe: the step cursor is checked under a row lock
_RETRY_OPTIONS = {
    "max_retries": 3,
    "min_backoff": 2000,  # 2 seconds
    "max_backoff": 60000,  # 1 minute
}


@dramatiq.actor(
    queue_name=Queues.PLANS,
    time_limit=600000,  # 10 minutes
    priority=Priority.HIGH,
    **_RETRY_OPTIONS,
)
def execute_plan_step(session_id: str, step_index: int) -> None:
    """Run one plan continuation.

    Args:
        session_id: Session whose plan advances.
        step_index: Step to run, or the step count for the combine phase.
    """
    run_async(_build_scheduler().run_step(session_id, step_index))


@dramatiq.actor(
    queue_name=Queues.PLANS,
    priority=Priority.NORMAL,
    **_RETRY_OPTIONS,
)
def resume_plan(session_id: str) -> None:
    """Re-enqueue the continuation for the plan state of a session."""

    async def _resume() -> None:
        state = await _build_scheduler().resume(session_id)
        logger.info("Resume requested: session=%s, state=%s", session_id, state)

    run_async(_resume())


@dramatiq.actor(
    queue_name=Queues.PLANS,
    priority=Priority.NORMAL,
    **_RETRY_OPTIONS,
)
def resume_active_plans() -> None:
    """Re-enqueue the continuation of every plan in progress.

    Sent by PlanRecoveryMiddleware when a worker boots.

    Raises:
        DatabaseError: If the database is unreachable; the actor is retried.
    """
    from src.infrastructure.database.connection import DatabaseError, get_worker_db_manager

    async def _resume_all() -> None:
        if not await get_worker_db_manager().check_connection():
            raise DatabaseError("Database unreachable, plan recovery postponed")
        resumed = await _build_scheduler().resume_all()
        logger.info("Active plans resumed: %d", resumed)

    run_async(_resume_all())


def get_plan_actors() -> list:
    """Get all plan actors."""
    return [
        execute_plan_step,
        resume_plan,
        resume_active_plans,
    ]
