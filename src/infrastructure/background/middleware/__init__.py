# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background processing middleware for StudyPilot.

- SessionContextMiddleware: session id propagation into tasks and logs
- PlanRecoveryMiddleware: resumes plans in progress when a worker boots
"""

from src.infrastructure.background.middleware.recovery import PlanRecoveryMiddleware
from src.infrastructure.background.middleware.session import (
    SessionContextMiddleware,
    get_current_session,
    set_current_session,
)

__all__ = [
    "PlanRecoveryMiddleware",
    "SessionContextMiddleware",
    "get_current_session",
    "set_current_session",
]
