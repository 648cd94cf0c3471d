# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Step scheduler: the durable plan state machine.

A plan is started by persisting it and enqueueing the continuation for
``Executing(0)``. Each continuation loads the plan record, derives the
state, runs exactly one step, commits its result and only then enqueues
the next continuation. After the last step the combiner runs in the same
continuation, and the plan record is deleted whatever the outcome.

Continuations are dramatiq messages (see
src/infrastructure/background/tasks/plan_steps.py), so progress survives
process restarts; a redelivered or stale continuation is dropped because
its index no longer matches the derived state.
"""

import asyncio
import logging
from typing import Optional, Protocol

from src.core.config.settings import PlanSettings, get_settings
from src.core.intelligence.llm import LLMClient, LLMError
from src.core.orchestration.combiner import ResultCombiner
from src.core.orchestration.plan_store import PlanSessionStore
from src.core.orchestration.states.plan import (
    Combining,
    Executing,
    Idle,
    PlanSnapshot,
    PlanState,
    continuation_index,
    derive_plan_state,
)
from src.core.orchestration.step_processor import StepProcessor
from src.core.prompts import PromptCatalog, get_prompt_catalog
from src.domains.chat.message_log import ChatMessageLog
from src.domains.knowledge.service import KnowledgeService
from src.infrastructure.database.connection import SessionFactory
from src.models.chat import ChatRole
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class ContinuationQueue(Protocol):
    """Durable queue delivering plan continuations at least once."""

    def enqueue(self, session_id: str, step_index: int) -> None:
        """Schedule run_step(session_id, step_index) with zero delay."""
        ...


def format_acknowledgment(steps: list[str], prompts: PromptCatalog) -> str:
    """Render the reply that lists the steps of a new plan."""
    summary = "\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))
    return PromptCatalog.render(
        prompts.orchestration.plan_copy.acknowledgment_template,
        count=len(steps),
        summary=summary,
    )


class PlanScheduler:
    """Drives plans of at least two steps through their states.

    Attributes:
        _session_factory: Opens a database session per unit of work.
        _queue: Durable continuation queue.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        queue: ContinuationQueue,
        step_processor: StepProcessor,
        combiner: ResultCombiner,
        prompts: Optional[PromptCatalog] = None,
        plan_settings: Optional[PlanSettings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._queue = queue
        self._step_processor = step_processor
        self._combiner = combiner
        self._prompts = prompts or get_prompt_catalog()
        self._limits = plan_settings or get_settings().plan

    async def is_busy(self, session_id: str) -> bool:
        """Check whether a plan is running for the session."""
        async with self._session_factory() as db:
            return await PlanSessionStore(db).is_processing(session_id)

    async def get_state(self, session_id: str) -> PlanState:
        """Derive the current plan state of a session."""
        async with self._session_factory() as db:
            snapshot = await PlanSessionStore(db).get(session_id)
        return derive_plan_state(snapshot)

    async def start(self, session_id: str, prompt: str, steps: list[str]) -> str:
        """Persist a plan, acknowledge it and enqueue its first step.

        Args:
            session_id: Session the plan belongs to.
            prompt: The request being answered.
            steps: At least two step descriptions.

        Returns:
            The acknowledgment listing the steps.

        Raises:
            ValueError: If fewer than two steps are given.
            PlanBusyError: If the session already has a plan in progress.
        """
        if len(steps) < 2:
            raise ValueError("A plan needs at least two steps; answer single steps directly")

        acknowledgment = format_acknowledgment(steps, self._prompts)

        async with self._session_factory() as db:
            await PlanSessionStore(db).create(session_id, prompt, steps)
            await ChatMessageLog(db, session_id).append(ChatRole.ASSISTANT, acknowledgment)

        self._queue.enqueue(session_id, 0)
        logger.info("Plan started: session=%s, steps=%d", session_id, len(steps))
        return acknowledgment

    async def run_step(self, session_id: str, step_index: int) -> None:
        """Run one continuation.

        The continuation only runs when its index matches the derived
        state: Executing(step_index), or Combining with step_index equal to
        the number of steps. Anything else is stale and dropped.
        """
        async with self._session_factory() as db:
            snapshot = await PlanSessionStore(db).get(session_id)
        state = derive_plan_state(snapshot)

        if snapshot is None or continuation_index(snapshot, state) != step_index:
            logger.warning(
                "Dropping stale plan continuation: session=%s, index=%d, state=%s",
                session_id,
                step_index,
                state,
            )
            return

        if isinstance(state, Combining):
            await self._combine(snapshot)
            return

        await self._execute(snapshot, step_index)

    async def resume(self, session_id: str) -> PlanState:
        """Re-enqueue the continuation for the derived state.

        Used after a restart. Idle sessions are left alone.

        Returns:
            The state that was resumed.
        """
        async with self._session_factory() as db:
            snapshot = await PlanSessionStore(db).get(session_id)
        state = derive_plan_state(snapshot)

        if snapshot is not None and not isinstance(state, Idle):
            index = continuation_index(snapshot, state)
            self._queue.enqueue(session_id, index)
            logger.info("Plan resumed: session=%s, state=%s", session_id, state)
        return state

    async def resume_if_stalled(self, session_id: str) -> bool:
        """Resume a plan that has made no progress for too long.

        A continuation that died without being redelivered leaves the plan
        processing with nothing in flight. Once the record has not been
        written for ``stall_after_seconds`` its continuation is enqueued
        again and the record is touched, so the next check waits a full
        period. Duplicates are dropped by the cursor check.

        Returns:
            True if the plan was resumed.
        """
        async with self._session_factory() as db:
            store = PlanSessionStore(db)
            snapshot = await store.get(session_id)
            state = derive_plan_state(snapshot)
            if snapshot is None or isinstance(state, Idle) or snapshot.updated_at is None:
                return False

            idle_seconds = (utc_now() - ensure_utc(snapshot.updated_at)).total_seconds()
            if idle_seconds < self._limits.stall_after_seconds:
                return False

            await store.touch(session_id)

        self._queue.enqueue(session_id, continuation_index(snapshot, state))
        logger.warning(
            "Stalled plan resumed: session=%s, state=%s, idle=%.0fs",
            session_id,
            state,
            idle_seconds,
        )
        return True

    async def resume_all(self) -> int:
        """Resume every plan in progress. Returns how many were resumed."""
        async with self._session_factory() as db:
            session_ids = await PlanSessionStore(db).list_active()

        resumed = 0
        for session_id in session_ids:
            if not isinstance(await self.resume(session_id), Idle):
                resumed += 1
        return resumed

    async def _execute(self, snapshot: PlanSnapshot, step_index: int) -> None:
        result = await self._answer_step(snapshot, step_index)

        async with self._session_factory() as db:
            updated = await PlanSessionStore(db).save_result(
                snapshot.session_id, step_index, result
            )

        if updated is None:
            logger.warning(
                "Plan step result discarded, plan moved on: session=%s, index=%d",
                snapshot.session_id,
                step_index,
            )
            return

        next_state = derive_plan_state(updated)
        if isinstance(next_state, Executing):
            self._queue.enqueue(updated.session_id, next_state.index)
        elif isinstance(next_state, Combining):
            await self._combine(updated)

    async def _answer_step(self, snapshot: PlanSnapshot, step_index: int) -> str:
        """Answer one step; a timeout or any step failure yields ''."""
        try:
            return await asyncio.wait_for(
                self._step_processor.process(
                    step=snapshot.steps[step_index],
                    step_index=step_index,
                    steps=snapshot.steps,
                    original_prompt=snapshot.original_prompt,
                ),
                timeout=self._limits.step_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Plan step timed out after %.0fs: session=%s, index=%d",
                self._limits.step_timeout_seconds,
                snapshot.session_id,
                step_index,
            )
        except LLMError as e:
            logger.warning(
                "Plan step failed: session=%s, index=%d, error=%s",
                snapshot.session_id,
                step_index,
                e,
            )
        except Exception:
            logger.exception(
                "Plan step raised: session=%s, index=%d",
                snapshot.session_id,
                step_index,
            )
        return ""

    async def _combine(self, snapshot: PlanSnapshot) -> None:
        session_id = snapshot.session_id
        try:
            try:
                async with self._session_factory() as db:
                    document = await self._combiner.combine(
                        original_prompt=snapshot.original_prompt,
                        steps=snapshot.steps,
                        results=snapshot.results,
                        knowledge=KnowledgeService(db, session_id),
                    )
            except Exception:
                logger.exception("Combining plan failed: session=%s", session_id)
                document = self._prompts.orchestration.plan_copy.fallback_document

            async with self._session_factory() as db:
                await ChatMessageLog(db, session_id).append(ChatRole.ASSISTANT, document)
        finally:
            async with self._session_factory() as db:
                await PlanSessionStore(db).delete(session_id)
            logger.info("Plan finished: session=%s", session_id)


def create_plan_scheduler(
    session_factory: SessionFactory,
    queue: ContinuationQueue,
    llm: Optional[LLMClient] = None,
    prompts: Optional[PromptCatalog] = None,
    plan_settings: Optional[PlanSettings] = None,
) -> PlanScheduler:
    """Build a PlanScheduler with its step processor and combiner."""
    llm = llm or LLMClient()
    prompts = prompts or get_prompt_catalog()
    plan_settings = plan_settings or get_settings().plan
    return PlanScheduler(
        session_factory=session_factory,
        queue=queue,
        step_processor=StepProcessor(llm, prompts, plan_settings),
        combiner=ResultCombiner(llm, prompts, plan_settings),
        prompts=prompts,
        plan_settings=plan_settings,
    )
