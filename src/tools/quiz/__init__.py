# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz tools.

- record_quiz_result: Append a finished quiz to the ledger
- get_quiz_history: List recent quiz results
"""

from src.tools.quiz.get_quiz_history import GetQuizHistoryTool
from src.tools.quiz.record_quiz_result import RecordQuizResultTool

__all__ = [
    "RecordQuizResultTool",
    "GetQuizHistoryTool",
]
