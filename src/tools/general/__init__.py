# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""General tools.

Tools for questions that no learner data tool covers:
- answer_general_question: Answer facts, small talk and the like
"""

from src.tools.general.answer_general_question import AnswerGeneralQuestionTool

__all__ = ["AnswerGeneralQuestionTool"]
