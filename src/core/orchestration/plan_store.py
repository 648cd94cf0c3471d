# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Persistence of plan progress, keyed by session id."""

import logging
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.orchestration.states.plan import PlanSnapshot
from src.infrastructure.database.models import PlanSessionRecord
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class PlanBusyError(Exception):
    """Raised when a session already has a plan in progress."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"A plan is already in progress for session {session_id}")
        self.session_id = session_id


def _to_snapshot(record: PlanSessionRecord) -> PlanSnapshot:
    return PlanSnapshot(
        session_id=record.session_id,
        original_prompt=record.original_prompt,
        steps=list(record.steps),
        results=list(record.results),
        completed_steps=record.completed_steps,
        processing=record.processing,
        updated_at=record.updated_at,
    )


class PlanSessionStore:
    """Reads and writes the plan record of a session.

    Every write commits, so a step result is durable before the scheduler
    enqueues the next continuation.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, session_id: str) -> Optional[PlanSnapshot]:
        """Load the plan of a session, or None."""
        record = await self._get_record(session_id)
        return _to_snapshot(record) if record else None

    async def is_processing(self, session_id: str) -> bool:
        """Check whether a plan is running for the session."""
        record = await self._get_record(session_id)
        return bool(record and record.processing)

    async def list_active(self) -> list[str]:
        """List the sessions that have a plan in progress."""
        result = await self._db.execute(
            select(PlanSessionRecord.session_id).where(PlanSessionRecord.processing.is_(True))
        )
        return list(result.scalars().all())

    async def create(self, session_id: str, original_prompt: str, steps: list[str]) -> PlanSnapshot:
        """Persist a new plan with empty results.

        The session row is locked while it is checked. A finished leftover
        record is replaced; a plan still processing is never overwritten.

        Raises:
            PlanBusyError: If the session already has a plan in progress.
        """
        result_row = await self._db.execute(
            select(PlanSessionRecord)
            .where(PlanSessionRecord.session_id == session_id)
            .with_for_update()
        )
        record = result_row.scalar_one_or_none()
        if record is not None and record.processing:
            await self._db.rollback()
            raise PlanBusyError(session_id)

        if record is None:
            record = PlanSessionRecord(session_id=session_id)
            self._db.add(record)

        record.original_prompt = original_prompt
        record.steps = list(steps)
        record.results = [""] * len(steps)
        record.completed_steps = 0
        record.processing = True
        record.updated_at = utc_now()

        try:
            await self._db.commit()
        except IntegrityError as e:
            # A concurrent create inserted the row first
            await self._db.rollback()
            raise PlanBusyError(session_id) from e
        return _to_snapshot(record)

    async def save_result(
        self,
        session_id: str,
        step_index: int,
        result: str,
    ) -> Optional[PlanSnapshot]:
        """Store the result of a step and advance the cursor.

        The record is locked while it is updated. Nothing is written when
        the plan is gone or step_index is not the next step, which happens
        when a continuation is delivered twice.

        Returns:
            The updated plan, or None when nothing was written.
        """
        result_row = await self._db.execute(
            select(PlanSessionRecord)
            .where(PlanSessionRecord.session_id == session_id)
            .with_for_update()
        )
        record = result_row.scalar_one_or_none()
        if record is None or not record.processing or record.completed_steps != step_index:
            await self._db.rollback()
            return None

        results = list(record.results)
        results[step_index] = result
        # Reassigned, not mutated, so the JSON column is marked dirty
        record.results = results
        record.completed_steps = step_index + 1
        record.updated_at = utc_now()

        await self._db.commit()
        return _to_snapshot(record)

    async def touch(self, session_id: str) -> None:
        """Refresh updated_at of a plan without changing its progress."""
        await self._db.execute(
            update(PlanSessionRecord)
            .where(PlanSessionRecord.session_id == session_id)
            .values(updated_at=utc_now())
        )
        await self._db.commit()

    async def delete(self, session_id: str) -> None:
        """Remove the plan of a session, returning it to Idle."""
        await self._db.execute(
            delete(PlanSessionRecord).where(PlanSessionRecord.session_id == session_id)
        )
        await self._db.commit()

    async def _get_record(self, session_id: str) -> Optional[PlanSessionRecord]:
        result = await self._db.execute(
            select(PlanSessionRecord).where(PlanSessionRecord.session_id == session_id)
        )
        return result.scalar_one_or_none()
