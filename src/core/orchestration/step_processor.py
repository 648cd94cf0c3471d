# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Step processor: answers one step of a plan."""

import logging
from typing import Optional

from src.core.config.settings import PlanSettings, get_settings
from src.core.intelligence.llm import LLMClient
from src.core.prompts import PromptCatalog, get_prompt_catalog

logger = logging.getLogger(__name__)


class StepProcessor:
    """Answers a single plan step with bounded-length text.

    Only the descriptions of earlier steps are passed along as context,
    not their results. The step prompt itself asks for brevity; no
    chunking is done here.
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

    def build_system_prompt(
        self,
        step_index: int,
        total_steps: int,
        original_prompt: str,
        previous_steps: list[str],
    ) -> str:
        """Render the system prompt for one step.

        Args:
            step_index: 0-based index of the step.
            total_steps: Number of steps in the plan.
            original_prompt: The request the plan answers.
            previous_steps: Descriptions of the steps before this one.
        """
        prompts = self._prompts.orchestration.step
        previous_steps_line = ""
        if previous_steps:
            previous_steps_line = PromptCatalog.render(
                prompts.previous_steps_template,
                previous_steps=", ".join(previous_steps),
            )
        return PromptCatalog.render(
            prompts.system_template,
            step_number=step_index + 1,
            total_steps=total_steps,
            original_prompt=original_prompt,
            previous_steps_line=previous_steps_line,
        )

    async def process(
        self,
        step: str,
        step_index: int,
        steps: list[str],
        original_prompt: str,
    ) -> str:
        """Answer one step.

        Args:
            step: The step description.
            step_index: 0-based index of the step.
            steps: Every step of the plan.
            original_prompt: The request the plan answers.

        Returns:
            The step answer.

        Raises:
            LLMError: If the inference call fails.
        """
        system_prompt = self.build_system_prompt(
            step_index=step_index,
            total_steps=len(steps),
            original_prompt=original_prompt,
            previous_steps=steps[:step_index],
        )
        response = await self._llm.complete(
            prompt=step,
            system_prompt=system_prompt,
            max_tokens=self._limits.step_max_tokens,
        )
        logger.debug(
            "Step %d/%d answered: %d chars",
            step_index + 1,
            len(steps),
            len(response.content),
        )
        return response.content
