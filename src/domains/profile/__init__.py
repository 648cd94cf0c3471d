# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Profile domain: who the learner is and what they want from the session."""

from src.domains.profile.service import (
    InvalidPreferenceError,
    ProfileService,
    ProfileServiceError,
)

__all__ = [
    "ProfileService",
    "ProfileServiceError",
    "InvalidPreferenceError",
]
