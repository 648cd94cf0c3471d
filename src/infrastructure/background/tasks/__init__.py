# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task actors for StudyPilot.

- Plans: one continuation per plan step, plus the combine phase

Usage:
    from src.infrastructure.background.tasks import execute_plan_step

    execute_plan_step.send("session-id", 0)
"""

from src.infrastructure.background.tasks.plan_steps import (
    DramatiqContinuationQueue,
    execute_plan_step,
    get_plan_actors,
    resume_active_plans,
    resume_plan,
)


def get_all_actors() -> list:
    """Get all registered actors."""
    return get_plan_actors()


__all__ = [
    "DramatiqContinuationQueue",
    "execute_plan_step",
    "resume_plan",
    "resume_active_plans",
    "get_plan_actors",
    "get_all_actors",
]
