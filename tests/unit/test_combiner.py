# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the result combiner and the plan state derivation."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.core.config.settings import PlanSettings
from src.core.intelligence.llm import LLMError, LLMResponse
from src.core.orchestration.combiner import (
    ResultCombiner,
    TopicTag,
    combine_sections,
    heuristic_topic,
    parse_topic_reply,
)
from src.core.orchestration.states.plan import (
    Combining,
    Executing,
    Idle,
    PlanSnapshot,
    continuation_index,
    derive_plan_state,
)


def make_llm(content: str = "") -> MagicMock:
    """Create an LLM client mock whose complete() returns content."""
    llm = MagicMock()
    llm.complete = AsyncMock(return_value=LLMResponse(content=content, model="test-model"))
    return llm


class TestCombineSections:
    """Tests for combine_sections."""

    def test_sections_in_plan_order(self) -> None:
        """Test headings and separators."""
        document = combine_sections(
            ["Step 1: Define trees", "Step 2: Traversals"],
            ["A tree is...", "In-order visits..."],
        )

        assert document == (
            "### Define trees\nA tree is...\n\n### Traversals\nIn-order visits..."
        )

    def test_step_prefix_is_case_insensitive(self) -> None:
        """Test that 'step 3:' is removed as well."""
        assert combine_sections(["step 3: Heaps"], ["..."]) == "### Heaps\n..."

    def test_headings_without_prefix_kept(self) -> None:
        """Test that plain step descriptions are used as is."""
        assert combine_sections(["Heaps"], [""]) == "### Heaps\n"


class TestParseTopicReply:
    """Tests for parse_topic_reply."""

    def test_plain_json(self) -> None:
        """Test a clean reply."""
        reply = '{"subject": "Data Structures", "topic": "Binary Trees"}'

        assert parse_topic_reply(reply) == TopicTag("Data Structures", "Binary Trees")

    def test_json_inside_prose(self) -> None:
        """Test that the first object is extracted from surrounding text."""
        reply = 'Sure! {"subject":" Algorithms ","topic":"Sorting"} hope that helps'

        assert parse_topic_reply(reply) == TopicTag("Algorithms", "Sorting")

    @pytest.mark.parametrize(
        "reply",
        [
            "no json here",
            '{"subject": "Math"}',
            '{"subject": "", "topic": "Limits"}',
            '{"subject": 1, "topic": "Limits"}',
            "{not json}",
        ],
    )
    def test_invalid_replies(self, reply: str) -> None:
        """Test that incomplete or malformed objects are rejected."""
        assert parse_topic_reply(reply) is None


class TestHeuristicTopic:
    """Tests for heuristic_topic."""

    @pytest.mark.parametrize(
        "prompt,topic",
        [
            ("Explain how binary search works?", "how binary search"),
            ("What is a linked list?", "a linked list"),
            ("teach me dynamic programming please", "dynamic programming"),
            ("Tell me about the French Revolution in detail", "the French Revolution"),
        ],
    )
    def test_strips_question_phrasing(self, prompt: str, topic: str) -> None:
        """Test prefix and filler removal."""
        assert heuristic_topic(prompt) == TopicTag("General", topic)

    def test_too_short_returns_none(self) -> None:
        """Test that fewer than two remaining characters give no tag."""
        assert heuristic_topic("Explain?") is None
        assert heuristic_topic("what is x") is None


class TestResultCombiner:
    """Tests for ResultCombiner.combine."""

    @pytest.mark.asyncio
    async def test_records_topic_and_adds_footer(self, prompt_catalog) -> None:
        """Test the footer when the learned topic is recorded."""
        llm = make_llm('{"subject":"Data Structures","topic":"Binary Trees"}')
        knowledge = MagicMock()
        knowledge.record_study = AsyncMock()
        combiner = ResultCombiner(llm, prompt_catalog, PlanSettings())

        document = await combiner.combine(
            "explain binary trees",
            ["Step 1: Define", "Step 2: Traverse"],
            ["def", "trav"],
            knowledge,
        )

        assert document.startswith("### Define\ndef\n\n### Traverse\ntrav")
        assert '"Data Structures > Binary Trees"' in document
        assert document.endswith(prompt_catalog.orchestration.plan_copy.what_next)
        knowledge.record_study.assert_awaited_once_with(
            subject="Data Structures",
            topic="Binary Trees",
            mastery=50,
            mark_studied=True,
            notes="Learned via 2-step explanation",
        )

    @pytest.mark.asyncio
    async def test_llm_failure_uses_heuristic(self, prompt_catalog) -> None:
        """Test that topic inference failure falls back to the prompt heuristic."""
        llm = make_llm()
        llm.complete.side_effect = LLMError("down")
        knowledge = MagicMock()
        knowledge.record_study = AsyncMock()
        combiner = ResultCombiner(llm, prompt_catalog, PlanSettings())

        document = await combiner.combine("What is a heap?", ["A", "B"], ["a", "b"], knowledge)

        assert '"General > a heap"' in document
        assert knowledge.record_study.call_args.kwargs["subject"] == "General"

    @pytest.mark.asyncio
    async def test_storage_failure_uses_explain_more(self, prompt_catalog) -> None:
        """Test that a failed knowledge write leaves the document without the tag."""
        llm = make_llm('{"subject":"Math","topic":"Limits"}')
        knowledge = MagicMock()
        knowledge.record_study = AsyncMock(
            side_effect=OperationalError("UPDATE", {}, Exception("db gone"))
        )
        combiner = ResultCombiner(llm, prompt_catalog, PlanSettings())

        document = await combiner.combine("limits", ["A", "B"], ["a", "b"], knowledge)

        assert document.endswith(prompt_catalog.orchestration.plan_copy.explain_more)
        assert "Math > Limits" not in document

    @pytest.mark.asyncio
    async def test_no_topic_uses_explain_more(self, prompt_catalog) -> None:
        """Test that no tag at all skips the knowledge write."""
        llm = make_llm("nothing useful")
        knowledge = MagicMock()
        knowledge.record_study = AsyncMock()
        combiner = ResultCombiner(llm, prompt_catalog, PlanSettings())

        document = await combiner.combine("?", ["A", "B"], ["a", "b"], knowledge)

        assert document.endswith(prompt_catalog.orchestration.plan_copy.explain_more)
        knowledge.record_study.assert_not_called()


class TestDerivePlanState:
    """Tests for derive_plan_state and continuation_index."""

    def make_snapshot(self, completed: int, processing: bool = True) -> PlanSnapshot:
        """Create a three-step plan snapshot."""
        return PlanSnapshot(
            session_id="s",
            original_prompt="p",
            steps=["a", "b", "c"],
            results=["x"] * completed + [""] * (3 - completed),
            completed_steps=completed,
            processing=processing,
        )

    def test_no_plan_is_idle(self) -> None:
        """Test that a missing record is Idle."""
        assert derive_plan_state(None) == Idle()

    def test_not_processing_is_idle(self) -> None:
        """Test that a finished record is Idle."""
        assert derive_plan_state(self.make_snapshot(1, processing=False)) == Idle()

    def test_executing_next_step(self) -> None:
        """Test that the cursor selects the next step."""
        snapshot = self.make_snapshot(2)
        state = derive_plan_state(snapshot)

        assert state == Executing(index=2)
        assert continuation_index(snapshot, state) == 2

    def test_all_results_is_combining(self) -> None:
        """Test that a full plan is Combining, reached with index N."""
        snapshot = self.make_snapshot(3)
        state = derive_plan_state(snapshot)

        assert state == Combining()
        assert continuation_index(snapshot, state) == 3

    def test_idle_has_no_continuation(self) -> None:
        """Test that Idle carries no index."""
        snapshot = self.make_snapshot(0)

        assert continuation_index(snapshot, Idle()) is None
