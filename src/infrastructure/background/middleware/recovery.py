# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Plan recovery on worker boot.

A continuation lost while no worker was running (or dead-lettered after
its retries) would leave its plan processing forever. When a worker
boots, this middleware sends resume_active_plans, which re-enqueues the
continuation of every plan in progress. Continuations that are still
queued become duplicates and are dropped by the cursor check.
"""

import logging

import dramatiq
from dramatiq import Middleware

logger = logging.getLogger(__name__)


class PlanRecoveryMiddleware(Middleware):
    """Sends resume_active_plans once per worker boot."""

    def after_worker_boot(self, broker: dramatiq.Broker, worker: dramatiq.Worker) -> None:
        """Schedule recovery of plans left in progress."""
        # Import here to avoid circular imports
        from src.infrastructure.background.tasks.plan_steps import resume_active_plans

        resume_active_plans.send()
        logger.info("Plan recovery scheduled after worker boot")
