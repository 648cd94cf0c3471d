# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Plan execution state.

A plan moves through ``Idle -> Executing(0) -> ... -> Executing(N-1) ->
Combining -> Idle``. The state is never stored as such; it is derived
from the persisted plan record every time a continuation runs, so a
restarted worker picks up exactly where the last committed step left off.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class Idle:
    """No plan is active for the session."""


@dataclass(frozen=True)
class Executing:
    """Step ``index`` (0-based) is the next step to run."""

    index: int


@dataclass(frozen=True)
class Combining:
    """Every step has a result; the combiner has not finished yet."""


PlanState = Union[Idle, Executing, Combining]


@dataclass
class PlanSnapshot:
    """Persisted progress of one plan.

    Attributes:
        session_id: Session owning the plan.
        original_prompt: The request being answered.
        steps: Step descriptions, in execution order.
        results: Step answers, same length as steps, filled left to right.
        completed_steps: Number of filled result slots.
        processing: True until the combiner has run.
        updated_at: When the record was last written.
    """

    session_id: str
    original_prompt: str
    steps: list[str]
    results: list[str] = field(default_factory=list)
    completed_steps: int = 0
    processing: bool = True
    updated_at: Optional[datetime] = None

    @property
    def step_count(self) -> int:
        return len(self.steps)


def derive_plan_state(snapshot: Optional[PlanSnapshot]) -> PlanState:
    """Compute the state of a plan from its persisted record.

    Args:
        snapshot: The persisted plan, or None when there is none.

    Returns:
        Idle without an active plan, Executing(completed_steps) while steps
        remain, Combining once every step has a result.
    """
    if snapshot is None or not snapshot.processing or not snapshot.steps:
        return Idle()
    if snapshot.completed_steps < snapshot.step_count:
        return Executing(index=max(snapshot.completed_steps, 0))
    return Combining()


def continuation_index(snapshot: PlanSnapshot, state: PlanState) -> Optional[int]:
    """Get the step index a continuation for ``state`` carries.

    Combining is reached through the continuation with index N (one past
    the last step). Idle has no continuation.
    """
    if isinstance(state, Executing):
        return state.index
    if isinstance(state, Combining):
        return snapshot.step_count
    return None
