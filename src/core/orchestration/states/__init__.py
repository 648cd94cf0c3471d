# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Orchestration state definitions."""

from src.core.orchestration.states.plan import (
    Combining,
    Executing,
    Idle,
    PlanSnapshot,
    PlanState,
    continuation_index,
    derive_plan_state,
)

__all__ = [
    "Idle",
    "Executing",
    "Combining",
    "PlanState",
    "PlanSnapshot",
    "derive_plan_state",
    "continuation_index",
]
