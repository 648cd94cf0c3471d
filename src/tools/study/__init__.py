# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Study session tools.

- start_study_session: Open a study session
- end_study_session: Close it with a summary
"""

from src.tools.study.end_study_session import EndStudySessionTool
from src.tools.study.start_study_session import StartStudySessionTool

__all__ = [
    "StartStudySessionTool",
    "EndStudySessionTool",
]
