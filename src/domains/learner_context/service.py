# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner context service.

Gathers profile, preferences, knowledge, quizzes and study time of one
session into a LearnerContext snapshot used by the chat system prompt and
the get_user_context tool.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.prompts import PromptCatalog, get_prompt_catalog
from src.domains.knowledge.service import KnowledgeService
from src.domains.learner_context import formatting
from src.domains.profile.service import ProfileService
from src.domains.quiz.service import QuizService
from src.domains.study_session.service import StudySessionService
from src.models.context import LearnerContext

WEAK_AREAS_LIMIT = 10
RECENT_QUIZZES_LIMIT = 5


class LearnerContextService:
    """Read-only view over everything known about one learner.

    Attributes:
        _session_id: Session being described.
    """

    def __init__(
        self,
        db: AsyncSession,
        session_id: str,
        prompts: Optional[PromptCatalog] = None,
    ) -> None:
        self._session_id = session_id
        self._prompts = prompts
        self._profile = ProfileService(db, session_id)
        self._knowledge = KnowledgeService(db, session_id)
        self._quizzes = QuizService(db, session_id, knowledge=self._knowledge)
        self._study = StudySessionService(db, session_id)

    async def get_full_context(self) -> LearnerContext:
        """Load the full learner context snapshot."""
        return LearnerContext(
            profile=await self._profile.get_profile(),
            preferences=await self._profile.get_preferences(),
            knowledge=await self._knowledge.get(),
            weak_areas=await self._knowledge.get_weak(limit=WEAK_AREAS_LIMIT),
            recent_quizzes=await self._quizzes.history(limit=RECENT_QUIZZES_LIMIT),
            quiz_stats=await self._quizzes.stats(),
            study_stats=await self._study.stats(),
        )

    async def format_for_display(self) -> str:
        """Render the learner context as readable sections."""
        return formatting.format_for_display(await self.get_full_context())

    async def build_system_prompt(self) -> str:
        """Render the single-turn system prompt for this learner."""
        prompts = self._prompts or get_prompt_catalog()
        context = await self.get_full_context()
        return formatting.build_system_prompt(context, prompts.chat)
