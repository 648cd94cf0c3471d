# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intent classifier.

Labels an incoming message CONVERSATIONAL (single-turn reply with tools)
or LEARNING (multi-step plan). Any failure falls back to CONVERSATIONAL,
the path that is always available.
"""

import logging
from typing import Optional

from src.core.config.settings import PlanSettings, get_settings
from src.core.intelligence.llm import LLMClient, LLMError
from src.core.prompts import PromptCatalog, get_prompt_catalog
from src.models.chat import Intent

logger = logging.getLogger(__name__)


def parse_intent(reply: str) -> Intent:
    """Map a classifier reply to an intent.

    Only a first word equal to LEARNING (any case) yields LEARNING.
    """
    words = reply.strip().upper().split()
    if words and words[0] == Intent.LEARNING.value:
        return Intent.LEARNING
    return Intent.CONVERSATIONAL


class IntentClassifier:
    """Routes messages between the single-turn and the plan path.

    Example:
        >>> classifier = IntentClassifier(llm)
        >>> await classifier.classify("explain binary trees")
        <Intent.LEARNING: 'LEARNING'>
    """

    def __init__(
        self,
        llm: LLMClient,
        prompts: Optional[PromptCatalog] = None,
        plan_settings: Optional[PlanSettings] = None,
    ) -> None:
        self._llm = llm
        self._prompts = prompts or get_prompt_catalog()
        self._limits = plan_settings or get_settings().plan

    async def classify(
        self,
        message: str,
        last_assistant_message: Optional[str] = None,
    ) -> Intent:
        """Classify a message. Never raises.

        Args:
            message: The incoming user message.
            last_assistant_message: What the assistant said just before, used
                to recognize short answers to its own questions.

        Returns:
            LEARNING only when the model says so; CONVERSATIONAL otherwise,
            including for blank input (no model call) and any failure.
        """
        trimmed = message.strip()
        if not trimmed:
            return Intent.CONVERSATIONAL

        prompts = self._prompts.orchestration.classifier
        context_line = ""
        if last_assistant_message:
            context_line = PromptCatalog.render(
                prompts.context_template,
                last_assistant_message=last_assistant_message[: self._limits.classifier_context_chars],
            )
        user_prompt = PromptCatalog.render(
            prompts.user_template,
            context_line=context_line,
            user_message=trimmed[: self._limits.classifier_message_chars],
        )

        try:
            response = await self._llm.complete(
                prompt=user_prompt,
                system_prompt=prompts.system,
                temperature=0.0,
                max_tokens=self._limits.classifier_max_tokens,
            )
        except LLMError as e:
            logger.warning("Intent classification failed, using CONVERSATIONAL: %s", e)
            return Intent.CONVERSATIONAL

        intent = parse_intent(response.content)
        logger.debug("Intent classified: %s (raw=%r)", intent.value, response.content[:50])
        return intent
