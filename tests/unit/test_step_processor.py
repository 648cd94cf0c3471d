# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the plan step processor."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config.settings import PlanSettings
from src.core.intelligence.llm import LLMError, LLMResponse
from src.core.orchestration.step_processor import StepProcessor

STEPS = [
    "Step 1: What recursion is",
    "Step 2: Base cases",
    "Step 3: Recursion versus iteration",
]


@pytest.fixture
def llm() -> MagicMock:
    """Create an LLM client mock answering every step."""
    client = MagicMock()
    client.complete = AsyncMock(
        return_value=LLMResponse(content="A base case stops the recursion.", model="test-model")
    )
    return client


class TestBuildSystemPrompt:
    """Tests for StepProcessor.build_system_prompt."""

    def test_first_step_has_no_previous_steps(self, llm, prompt_catalog) -> None:
        """Test that step 1 names its position and the original request only."""
        processor = StepProcessor(llm, prompt_catalog, PlanSettings())

        prompt = processor.build_system_prompt(0, 3, "Explain recursion fully", [])

        assert "step 1 of 3" in prompt
        assert '"Explain recursion fully"' in prompt
        assert "Previous steps covered" not in prompt
        assert "Keep response under 1200 characters" in prompt

    def test_later_step_lists_previous_descriptions(self, llm, prompt_catalog) -> None:
        """Test that earlier step descriptions are joined with commas."""
        processor = StepProcessor(llm, prompt_catalog, PlanSettings())

        prompt = processor.build_system_prompt(2, 3, "Explain recursion fully", STEPS[:2])

        assert "step 3 of 3" in prompt
        assert (
            "Previous steps covered: Step 1: What recursion is, Step 2: Base cases" in prompt
        )


class TestProcess:
    """Tests for StepProcessor.process."""

    @pytest.mark.asyncio
    async def test_answers_step_with_step_budget(self, llm, prompt_catalog) -> None:
        """Test that the step is sent as the prompt with step_max_tokens."""
        processor = StepProcessor(llm, prompt_catalog, PlanSettings(step_max_tokens=512))

        answer = await processor.process(
            step=STEPS[1],
            step_index=1,
            steps=STEPS,
            original_prompt="Explain recursion fully",
        )

        assert answer == "A base case stops the recursion."
        kwargs = llm.complete.call_args.kwargs
        assert kwargs["prompt"] == STEPS[1]
        assert kwargs["max_tokens"] == 512
        assert "step 2 of 3" in kwargs["system_prompt"]
        assert "Step 1: What recursion is" in kwargs["system_prompt"]
        assert "Step 3" not in kwargs["system_prompt"]

    @pytest.mark.asyncio
    async def test_inference_failure_propagates(self, llm, prompt_catalog) -> None:
        """Test that LLMError reaches the scheduler, which turns it into ''."""
        llm.complete.side_effect = LLMError("Completion failed: timeout")
        processor = StepProcessor(llm, prompt_catalog, PlanSettings())

        with pytest.raises(LLMError):
            await processor.process(
                step=STEPS[0],
                step_index=0,
                steps=STEPS,
                original_prompt="Explain recursion fully",
            )
