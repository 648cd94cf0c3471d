# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task infrastructure for StudyPilot.

Plan continuations run as Dramatiq actors on a Redis broker.

Quick Start:
    # Setup broker (call once at startup)
    from src.infrastructure.background import setup_dramatiq
    setup_dramatiq()

    # Continuations are enqueued by the plan scheduler
    from src.infrastructure.background.tasks import DramatiqContinuationQueue

Running Workers:
    dramatiq src.infrastructure.background.tasks --processes 2 --threads 4
"""

from src.infrastructure.background.broker import (
    BrokerManager,
    Priority,
    Queues,
    SessionContextMiddleware,
    get_broker,
    get_broker_manager,
    get_current_session,
    set_current_session,
    setup_dramatiq,
    shutdown_dramatiq,
)

# Task actors are imported lazily to avoid circular imports
# Use: from src.infrastructure.background.tasks import execute_plan_step

__all__ = [
    "BrokerManager",
    "Priority",
    "Queues",
    "SessionContextMiddleware",
    "get_broker",
    "get_broker_manager",
    "get_current_session",
    "set_current_session",
    "setup_dramatiq",
    "shutdown_dramatiq",
]
