# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Onboarding flow: what the assistant should ask next.

Profile questions come first (major, year, learning methods), then the
session goal, then the questions of the branch the goal selects.
"""

from typing import Optional

from src.core.prompts.models import ToolPrompts
from src.models.profile import Goal, SessionPreferencesResponse, UserProfileResponse


def next_profile_action(
    profile: UserProfileResponse,
    prompts: ToolPrompts,
    name: Optional[str] = None,
) -> str:
    """Get the NEXT instruction after a profile update."""
    if not profile.major:
        return prompts.next_action("ask_major", name=name or profile.name or "there")
    if not profile.year:
        return prompts.next_action("ask_year")
    if not profile.preferred_learning_methods:
        return prompts.next_action("ask_learning_methods")
    return prompts.next_action("ask_goal")


def next_session_action(preferences: SessionPreferencesResponse, prompts: ToolPrompts) -> str:
    """Get the NEXT instruction after a session preference update.

    Returns:
        The instruction, or "" when a goal branch has nothing left to ask
        and no goal applies.
    """
    if preferences.goal == Goal.LEARN.value:
        if not preferences.learn_topic:
            return prompts.next_action("ask_learn_topic")
        if not preferences.learn_concept:
            return prompts.next_action("ask_learn_concept")
        return prompts.next_action("start_teaching")

    if preferences.goal == Goal.EXAM.value:
        if not preferences.exam_name:
            return prompts.next_action("ask_exam_name")
        if not preferences.exam_depth:
            return prompts.next_action("ask_exam_depth")
        if not preferences.exam_time_left:
            return prompts.next_action("ask_exam_time")
        return prompts.next_action("create_study_plan")

    if preferences.goal == Goal.QUIZ.value:
        if not preferences.quiz_topic:
            return prompts.next_action("ask_quiz_topic")
        if not preferences.quiz_num_questions:
            return prompts.next_action("ask_quiz_num_questions")
        if not preferences.quiz_type:
            return prompts.next_action("ask_quiz_type")
        if preferences.quiz_hints_allowed is None:
            return prompts.next_action("ask_quiz_hints")
        return prompts.next_action("start_quiz")

    return prompts.next_action("ask_goal")
