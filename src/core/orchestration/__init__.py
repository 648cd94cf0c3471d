# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Message orchestration for StudyPilot.

This package decides, per message, between the single-turn path and the
plan path, and runs plans through a durable state machine:
- IntentClassifier: CONVERSATIONAL or LEARNING
- PlanGenerator: 1-10 step descriptions for a LEARNING request
- PlanScheduler: Idle -> Executing(i) -> Combining -> Idle
- StepProcessor: one bounded answer per step
- ResultCombiner: the final document plus a knowledge update

Architecture:
    ChatService -> IntentClassifier -> PlanGenerator -> PlanScheduler
                                                           |
                              dramatiq continuation -> StepProcessor
                                                           |
                                                     ResultCombiner -> KnowledgeService

Usage:
    from src.core.orchestration import create_plan_scheduler

    scheduler = create_plan_scheduler(db_manager.get_session, queue)
    await scheduler.start(session_id, prompt, steps)
"""

from src.core.orchestration.combiner import (
    ResultCombiner,
    TopicTag,
    combine_sections,
    heuristic_topic,
    parse_topic_reply,
)
from src.core.orchestration.intent import IntentClassifier, parse_intent
from src.core.orchestration.plan_store import PlanBusyError, PlanSessionStore
from src.core.orchestration.planner import PlanGenerator, parse_plan
from src.core.orchestration.scheduler import (
    ContinuationQueue,
    PlanScheduler,
    create_plan_scheduler,
    format_acknowledgment,
)
from src.core.orchestration.states import (
    Combining,
    Executing,
    Idle,
    PlanSnapshot,
    PlanState,
    derive_plan_state,
)
from src.core.orchestration.step_processor import StepProcessor

__all__ = [
    "IntentClassifier",
    "parse_intent",
    "PlanGenerator",
    "parse_plan",
    "StepProcessor",
    "ResultCombiner",
    "TopicTag",
    "combine_sections",
    "heuristic_topic",
    "parse_topic_reply",
    "PlanSessionStore",
    "PlanBusyError",
    "PlanScheduler",
    "ContinuationQueue",
    "create_plan_scheduler",
    "format_acknowledgment",
    "Idle",
    "Executing",
    "Combining",
    "PlanState",
    "PlanSnapshot",
    "derive_plan_state",
]
