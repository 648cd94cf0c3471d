# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prompt catalog data models for StudyPilot.

The catalog holds every piece of wording sent to the language model or
returned to the learner. It is loaded from config/prompts/*.yaml, one file
per section, and validated against these models. Templates are str.format
strings rendered through PromptCatalog.render().
"""

from pydantic import BaseModel, Field


class ClassifierPrompts(BaseModel):
    """Prompts for the CONVERSATIONAL/LEARNING intent classifier."""

    system: str = Field(..., min_length=1)
    context_template: str = Field(
        ...,
        description="Line prepended when the prior assistant utterance is known",
    )
    user_template: str = Field(..., min_length=1)


class PlannerPrompts(BaseModel):
    """Prompts for the plan generator."""

    system: str = Field(..., min_length=1)
    user_template: str = Field(..., min_length=1)


class StepPrompts(BaseModel):
    """Prompts for answering one plan step."""

    system_template: str = Field(..., min_length=1)
    previous_steps_template: str = Field(..., min_length=1)


class TopicPrompts(BaseModel):
    """Prompts for the subject/topic inference call."""

    system: str = Field(..., min_length=1)
    user_template: str = Field(..., min_length=1)


class PlanCopy(BaseModel):
    """Learner-facing text emitted by the plan path.

    Attributes:
        acknowledgment_template: Reply listing the steps of a new plan.
        tracking_added_template: Footer when a topic was recorded.
        what_next: Suggestions appended after tracking_added_template.
        explain_more: Footer when no topic could be recorded.
        fallback_document: Published when combining the plan fails.
    """

    acknowledgment_template: str
    tracking_added_template: str
    what_next: str
    explain_more: str
    fallback_document: str


class OrchestrationPrompts(BaseModel):
    """The orchestration.yaml catalog file."""

    classifier: ClassifierPrompts
    planner: PlannerPrompts
    step: StepPrompts
    topic: TopicPrompts
    plan_copy: PlanCopy


class ChatPrompts(BaseModel):
    """The chat.yaml catalog file."""

    system_template: str = Field(..., min_length=1)
    base_rules: str
    profile_complete: str
    missing_profile_template: str
    not_set: str
    knowledge_none: str
    weak_areas_none: str
    recent_quizzes_none: str
    recent_quizzes_template: str
    general_question_system: str
    busy_notice: str
    empty_reply: str
    error_reply: str
    missing_field_labels: dict[str, str] = Field(default_factory=dict)


class ToolPrompts(BaseModel):
    """The tools.yaml catalog file.

    Attributes:
        descriptions: Tool name to the description shown to the model.
        messages: Named reply templates returned by tools.
        next: Onboarding instructions appended to profile/session replies.
    """

    descriptions: dict[str, str] = Field(default_factory=dict)
    messages: dict[str, str] = Field(default_factory=dict)
    next: dict[str, str] = Field(default_factory=dict)

    def description(self, tool_name: str) -> str:
        """Get the description for a tool, empty when not configured."""
        return self.descriptions.get(tool_name, "")

    def message(self, key: str, **kwargs: object) -> str:
        """Render a tool reply template.

        Raises:
            KeyError: If the template is not in the catalog.
        """
        template = self.messages[key]
        return template.format(**kwargs) if kwargs else template

    def next_action(self, key: str, **kwargs: object) -> str:
        """Render an onboarding NEXT instruction.

        Raises:
            KeyError: If the instruction is not in the catalog.
        """
        template = self.next[key]
        return template.format(**kwargs) if kwargs else template


class PromptCatalog(BaseModel):
    """Every prompt and reply template, grouped by catalog file."""

    orchestration: OrchestrationPrompts
    chat: ChatPrompts
    tools: ToolPrompts = Field(default_factory=ToolPrompts)

    @staticmethod
    def render(template: str, **kwargs: object) -> str:
        """Fill a str.format template.

        Args:
            template: Template text from the catalog.
            **kwargs: Placeholder values.

        Returns:
            The rendered text.
        """
        return template.format(**kwargs)
