# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz domain: the append-only quiz ledger and its statistics."""

from src.domains.quiz.service import (
    InvalidQuizTypeError,
    QuizService,
    QuizServiceError,
    validate_quiz_type,
)
from src.domains.quiz.stats import rank_missed_concepts

__all__ = [
    "QuizService",
    "QuizServiceError",
    "InvalidQuizTypeError",
    "validate_quiz_type",
    "rank_missed_concepts",
]
