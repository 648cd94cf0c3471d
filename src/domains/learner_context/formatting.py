# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rendering of a LearnerContext for the learner and for the model."""

import re

from src.core.prompts import PromptCatalog
from src.core.prompts.models import ChatPrompts
from src.models.context import LearnerContext
from src.models.knowledge import KnowledgeEntryResponse

DISPLAY_TOPICS = 15
DISPLAY_WEAK_AREAS = 5
DISPLAY_QUIZZES = 5
PROMPT_TOPICS = 10
PROMPT_WEAK_AREAS = 5
PROMPT_QUIZZES = 3

MAX_TOPIC_LENGTH = 40

# Topics recorded from whole chat messages rather than real topic names
_CHATTY_TOPIC = re.compile(r"^(hi|hello|how|what|give me|i want|you doing|can you)\b", re.IGNORECASE)

_PLACEHOLDER = "-"


def is_real_topic(entry: KnowledgeEntryResponse) -> bool:
    """Check whether an entry looks like a topic name rather than a sentence."""
    return len(entry.topic) <= MAX_TOPIC_LENGTH and not _CHATTY_TOPIC.match(entry.topic.strip())


def format_for_display(context: LearnerContext) -> str:
    """Render the learner context as readable sections.

    Sections, in order: Profile, Topics studied, Areas to review, Recent
    quizzes and Quiz stats. Used to answer "what do you know about me".
    """
    lines: list[str] = ["**Profile**"]
    profile = context.profile
    if profile and (profile.name or profile.major or profile.year):
        lines.append(f"• Name: {profile.name or _PLACEHOLDER}")
        lines.append(f"• Major: {profile.major or _PLACEHOLDER}")
        lines.append(f"• Year: {profile.year or _PLACEHOLDER}")
        methods = ", ".join(profile.preferred_learning_methods) or _PLACEHOLDER
        lines.append(f"• Learning style: {methods}")
    else:
        lines.append("No profile yet.")

    lines.append("\n**Topics studied**")
    topics = [k for k in context.knowledge if is_real_topic(k)]
    if topics:
        for entry in topics[:DISPLAY_TOPICS]:
            lines.append(f"• {entry.label}: {entry.mastery}% mastery")
        if len(topics) > DISPLAY_TOPICS:
            lines.append(f"… and {len(topics) - DISPLAY_TOPICS} more")
    else:
        lines.append("None yet.")

    lines.append("\n**Areas to review**")
    weak = [k for k in context.weak_areas if is_real_topic(k)]
    if weak:
        lines.extend(f"• {entry.label}" for entry in weak[:DISPLAY_WEAK_AREAS])
    else:
        lines.append("None.")

    lines.append("\n**Recent quizzes**")
    if context.recent_quizzes:
        for quiz in context.recent_quizzes[:DISPLAY_QUIZZES]:
            topic = f" > {quiz.topic}" if quiz.topic else ""
            lines.append(f"• {quiz.subject}{topic}: {quiz.score}%")
    else:
        lines.append("None yet.")

    lines.append("\n**Quiz stats**")
    lines.append(f"• Total quizzes: {context.quiz_stats.total_quizzes}")
    lines.append(f"• Average score: {context.quiz_stats.average_score}%")

    return "\n".join(lines)


def missing_profile_line(context: LearnerContext, prompts: ChatPrompts) -> str:
    """Render the line telling the model which profile fields to ask for."""
    if context.profile is None:
        missing = ["name", "major", "year", "preferred_learning_methods"]
    else:
        missing = context.profile.missing_fields

    if not missing:
        return prompts.profile_complete

    labels = [prompts.missing_field_labels.get(field, field) for field in missing]
    return PromptCatalog.render(prompts.missing_profile_template, missing=", ".join(labels))


def build_system_prompt(context: LearnerContext, prompts: ChatPrompts) -> str:
    """Render the single-turn system prompt with what is known about the learner."""
    profile = context.profile
    not_set = prompts.not_set

    knowledge_summary = (
        "; ".join(f"{k.label} ({k.mastery}%)" for k in context.knowledge[:PROMPT_TOPICS])
        or prompts.knowledge_none
    )
    weak_summary = (
        "; ".join(k.label for k in context.weak_areas[:PROMPT_WEAK_AREAS])
        or prompts.weak_areas_none
    )
    if context.recent_quizzes:
        entries = "; ".join(
            f"{q.subject} {q.score}%" for q in context.recent_quizzes[:PROMPT_QUIZZES]
        )
        recent_quizzes_line = PromptCatalog.render(prompts.recent_quizzes_template, entries=entries)
    else:
        recent_quizzes_line = prompts.recent_quizzes_none

    return PromptCatalog.render(
        prompts.system_template,
        name=(profile.name if profile else None) or not_set,
        major=(profile.major if profile else None) or not_set,
        year=(profile.year if profile else None) or not_set,
        learning_methods=", ".join(profile.preferred_learning_methods if profile else []) or not_set,
        missing_line=missing_profile_line(context, prompts),
        knowledge_summary=knowledge_summary,
        weak_summary=weak_summary,
        recent_quizzes_line=recent_quizzes_line,
        base_rules=prompts.base_rules,
    )
