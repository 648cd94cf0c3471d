# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the intent classifier and the plan generator."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config.settings import PlanSettings
from src.core.intelligence.llm import LLMError, LLMResponse
from src.core.orchestration.intent import IntentClassifier, parse_intent
from src.core.orchestration.planner import PlanGenerator, parse_plan
from src.models.chat import Intent


def make_llm(content: str = "") -> MagicMock:
    """Create an LLM client mock whose complete() returns content."""
    llm = MagicMock()
    llm.complete = AsyncMock(return_value=LLMResponse(content=content, model="test-model"))
    return llm


class TestParseIntent:
    """Tests for parse_intent."""

    @pytest.mark.parametrize(
        "reply,expected",
        [
            ("LEARNING", Intent.LEARNING),
            ("  learning\n", Intent.LEARNING),
            ("Learning because the user wants an explanation", Intent.LEARNING),
            ("CONVERSATIONAL", Intent.CONVERSATIONAL),
            ("This is LEARNING", Intent.CONVERSATIONAL),
            ("LEARNING:", Intent.CONVERSATIONAL),
            ("", Intent.CONVERSATIONAL),
        ],
    )
    def test_first_word_decides(self, reply: str, expected: Intent) -> None:
        """Test that only a first word equal to LEARNING selects LEARNING."""
        assert parse_intent(reply) == expected


class TestIntentClassifier:
    """Tests for IntentClassifier.classify."""

    @pytest.mark.asyncio
    async def test_learning_reply(self, prompt_catalog) -> None:
        """Test that a LEARNING reply is returned."""
        llm = make_llm("LEARNING")
        classifier = IntentClassifier(llm, prompt_catalog, PlanSettings())

        assert await classifier.classify("explain binary trees") == Intent.LEARNING

    @pytest.mark.asyncio
    async def test_blank_message_skips_model(self, prompt_catalog) -> None:
        """Test that blank input is CONVERSATIONAL without a model call."""
        llm = make_llm("LEARNING")
        classifier = IntentClassifier(llm, prompt_catalog, PlanSettings())

        assert await classifier.classify("   ") == Intent.CONVERSATIONAL
        llm.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_llm_error_falls_back(self, prompt_catalog) -> None:
        """Test that inference failures yield CONVERSATIONAL."""
        llm = make_llm()
        llm.complete.side_effect = LLMError("provider down")
        classifier = IntentClassifier(llm, prompt_catalog, PlanSettings())

        assert await classifier.classify("teach me recursion") == Intent.CONVERSATIONAL

    @pytest.mark.asyncio
    async def test_prompt_is_truncated(self, prompt_catalog) -> None:
        """Test that message and context are capped before sending."""
        llm = make_llm("CONVERSATIONAL")
        limits = PlanSettings(classifier_message_chars=10, classifier_context_chars=5)
        classifier = IntentClassifier(llm, prompt_catalog, limits)

        await classifier.classify("x" * 50, last_assistant_message="y" * 50)

        prompt = llm.complete.call_args.kwargs["prompt"]
        assert "x" * 10 in prompt
        assert "x" * 11 not in prompt
        assert '"yyyyy"' in prompt
        assert llm.complete.call_args.kwargs["temperature"] == 0.0
        assert llm.complete.call_args.kwargs["max_tokens"] == limits.classifier_max_tokens

    @pytest.mark.asyncio
    async def test_no_context_line_without_prior_message(self, prompt_catalog) -> None:
        """Test that the prior utterance line is omitted when unknown."""
        llm = make_llm("CONVERSATIONAL")
        classifier = IntentClassifier(llm, prompt_catalog, PlanSettings())

        await classifier.classify("hello")

        assert "Last thing the assistant said" not in llm.complete.call_args.kwargs["prompt"]


class TestParsePlan:
    """Tests for the parse_plan cascade."""

    def test_list_taken_as_is(self) -> None:
        """Test that a list reply is used directly."""
        assert parse_plan(["Step 1: A", "Step 2: B"], "p") == ["Step 1: A", "Step 2: B"]

    def test_json_text(self) -> None:
        """Test that JSON array text is parsed."""
        assert parse_plan('["Step 1: A", "Step 2: B"]', "p") == ["Step 1: A", "Step 2: B"]

    def test_bracketed_substring(self) -> None:
        """Test that an array embedded in prose is found."""
        raw = 'Here is the plan:\n```json\n["Define it", "Show an example"]\n```'

        assert parse_plan(raw, "p") == ["Define it", "Show an example"]

    def test_unparseable_falls_back_to_prompt(self) -> None:
        """Test that prose without an array yields the prompt."""
        assert parse_plan("I can't plan this", "explain recursion") == ["explain recursion"]

    def test_non_list_json_falls_back(self) -> None:
        """Test that a JSON object is not a plan."""
        assert parse_plan('{"steps": ["a"]}', "prompt") == ["prompt"]

    def test_blank_entries_dropped_and_strings_forced(self) -> None:
        """Test entry cleaning."""
        assert parse_plan(["  A ", "", None, 3], "p") == ["A", "3"]

    def test_empty_list_falls_back(self) -> None:
        """Test that an empty array yields the prompt."""
        assert parse_plan("[]", "prompt") == ["prompt"]

    def test_capped_at_max_steps(self) -> None:
        """Test that long plans are truncated."""
        raw = [f"Step {i}" for i in range(1, 15)]

        steps = parse_plan(raw, "p", max_steps=10)

        assert len(steps) == 10
        assert steps[-1] == "Step 10"


class TestPlanGenerator:
    """Tests for PlanGenerator.generate."""

    @pytest.mark.asyncio
    async def test_generates_steps(self, prompt_catalog) -> None:
        """Test that the model reply is parsed into steps."""
        llm = make_llm('["Step 1: What is a tree", "Step 2: Traversals"]')
        planner = PlanGenerator(llm, prompt_catalog, PlanSettings())

        steps = await planner.generate("explain binary trees")

        assert steps == ["Step 1: What is a tree", "Step 2: Traversals"]
        assert "explain binary trees" in llm.complete.call_args.kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_llm_error_yields_single_step(self, prompt_catalog) -> None:
        """Test that a failed call produces the one-step plan."""
        llm = make_llm()
        llm.complete.side_effect = LLMError("timeout")
        planner = PlanGenerator(llm, prompt_catalog, PlanSettings())

        assert await planner.generate("explain heaps") == ["explain heaps"]

    @pytest.mark.asyncio
    async def test_full_prompt_is_sent(self, prompt_catalog) -> None:
        """Test that the planner prompt is not truncated."""
        llm = make_llm("[]")
        planner = PlanGenerator(llm, prompt_catalog, PlanSettings(classifier_message_chars=5))
        prompt = "explain " + "very " * 100 + "long topics"

        await planner.generate(prompt)

        assert prompt in llm.complete.call_args.kwargs["prompt"]
