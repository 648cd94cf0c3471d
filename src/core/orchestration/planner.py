# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Plan generator.

Decomposes a LEARNING request into an ordered list of step descriptions.
Model output is never trusted to be well formed: parsing goes through a
cascade that ends with the single-step plan ``[prompt]``.
"""

import json
import logging
import re
from typing import Any, Optional

from src.core.config.settings import PlanSettings, get_settings
from src.core.intelligence.llm import LLMClient, LLMError
from src.core.prompts import PromptCatalog, get_prompt_catalog

logger = logging.getLogger(__name__)

_LIST_LITERAL = re.compile(r"\[[\s\S]*?\]")


def _clean_steps(items: list[Any], max_steps: int) -> list[str]:
    steps = [str(item).strip() for item in items if item is not None]
    return [step for step in steps if step][:max_steps]


def _load_list(text: str) -> Optional[list[Any]]:
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, list) else None


def parse_plan(raw: Any, prompt: str, max_steps: int = 10) -> list[str]:
    """Turn a planner reply into 1 to max_steps step descriptions.

    Cascade:
        1. A list is taken as is.
        2. Text is parsed as a JSON list.
        3. The first bracketed substring of the text is parsed as a JSON list.
        4. Otherwise the plan is ``[prompt]``.

    Entries are converted to strings and blank entries are dropped. An
    empty result also falls back to ``[prompt]``.

    Args:
        raw: The model reply.
        prompt: The original user prompt.
        max_steps: Maximum number of steps kept.

    Returns:
        A non-empty list of step descriptions.
    """
    items: Optional[list[Any]] = None
    if isinstance(raw, list):
        items = raw
    elif isinstance(raw, str):
        items = _load_list(raw)
        if items is None:
            match = _LIST_LITERAL.search(raw)
            if match:
                items = _load_list(match.group(0))

    steps = _clean_steps(items, max_steps) if items else []
    return steps or [prompt]


class PlanGenerator:
    """Generates step plans for LEARNING requests.

    Example:
        >>> planner = PlanGenerator(llm)
        >>> await planner.generate("explain recursion")
        ['Step 1: Define recursion', 'Step 2: Show an example']
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

    async def generate(self, prompt: str) -> list[str]:
        """Generate a plan for the full, untruncated prompt. Never raises.

        Returns:
            Between 1 and max_steps step descriptions. A length-1 plan means
            the request should take the single-turn path.
        """
        prompts = self._prompts.orchestration.planner

        try:
            response = await self._llm.complete(
                prompt=PromptCatalog.render(prompts.user_template, prompt=prompt),
                system_prompt=prompts.system,
                temperature=0.3,
                max_tokens=self._limits.plan_max_tokens,
            )
        except LLMError as e:
            logger.warning("Plan generation failed, using single step: %s", e)
            return [prompt]

        steps = parse_plan(response.content, prompt, self._limits.max_steps)
        logger.info("Plan generated with %d step(s)", len(steps))
        return steps
