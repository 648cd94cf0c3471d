# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Study session domain."""

from src.domains.study_session.service import (
    InvalidSessionTypeError,
    StudySessionError,
    StudySessionNotFoundError,
    StudySessionService,
)

__all__ = [
    "StudySessionService",
    "StudySessionError",
    "InvalidSessionTypeError",
    "StudySessionNotFoundError",
]
