# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner tools.

Tools for who the learner is and what they want from the session:
- get_user_context: Readable summary of everything known
- update_user_profile: Save profile fields, then ask the next question
- update_session_preferences: Save session choices, then ask the next question
"""

from src.tools.learner.get_user_context import GetUserContextTool
from src.tools.learner.update_session_preferences import UpdateSessionPreferencesTool
from src.tools.learner.update_user_profile import UpdateUserProfileTool

__all__ = [
    "GetUserContextTool",
    "UpdateUserProfileTool",
    "UpdateSessionPreferencesTool",
]
