# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for knowledge scoring rules and quiz statistics helpers."""

import pytest

from src.domains.knowledge.scoring import (
    clamp_level,
    is_weak,
    merge_weak_areas,
    quiz_mastery,
    round_half_up,
    weighted_mastery,
)
from src.domains.quiz.stats import rank_missed_concepts


class TestWeightedMastery:
    """Tests for the quiz-driven mastery blend."""

    @pytest.mark.parametrize(
        "prior,score,expected",
        [
            (40, 100, 58),
            (50, 50, 50),
            (100, 0, 70),
            (0, 100, 30),
            (55, 60, 57),
        ],
    )
    def test_blend(self, prior: int, score: int, expected: int) -> None:
        """Test round(prior * 0.7 + score * 0.3)."""
        assert weighted_mastery(prior, score) == expected

    def test_half_rounds_up(self) -> None:
        """Test that exact halves round away from zero."""
        assert round_half_up(57.5) == 58
        assert round_half_up(56.5) == 57

    def test_new_entry_takes_score(self) -> None:
        """Test that a first quiz sets mastery to the score."""
        assert quiz_mastery(None, 85) == 85

    def test_existing_entry_blends(self) -> None:
        """Test that later quizzes smooth the mastery."""
        assert quiz_mastery(40, 100) == 58

    def test_clamp_level(self) -> None:
        """Test that levels stay in [0, 100]."""
        assert clamp_level(-5) == 0
        assert clamp_level(150) == 100
        assert clamp_level(42) == 42


class TestWeakAreas:
    """Tests for weak area helpers."""

    def test_merge_keeps_first_occurrence(self) -> None:
        """Test the union keeps order and drops duplicates."""
        merged = merge_weak_areas(["recursion", "pointers"], ["pointers", "base case"])

        assert merged == ["recursion", "pointers", "base case"]

    def test_merge_deduplicates_within_one_list(self) -> None:
        """Test that duplicates inside the missed list collapse too."""
        assert merge_weak_areas([], ["a", "a", "b"]) == ["a", "b"]

    @pytest.mark.parametrize(
        "mastery,confidence,expected",
        [
            (59, 100, True),
            (60, 49, True),
            (60, 50, False),
            (90, 90, False),
        ],
    )
    def test_is_weak(self, mastery: int, confidence: int, expected: bool) -> None:
        """Test the mastery < 60 or confidence < 50 rule."""
        assert is_weak(mastery, confidence) is expected


class TestRankMissedConcepts:
    """Tests for rank_missed_concepts."""

    def test_most_frequent_first(self) -> None:
        """Test that concepts are ranked by count."""
        rows = [["loops"], ["recursion", "loops"], ["recursion", "loops"]]

        assert rank_missed_concepts(rows) == ["loops", "recursion"]

    def test_ties_keep_first_seen_order(self) -> None:
        """Test that equal counts keep encounter order."""
        rows = [["b", "a"], ["c"]]

        assert rank_missed_concepts(rows) == ["b", "a", "c"]

    def test_limit(self) -> None:
        """Test that at most limit concepts are returned."""
        rows = [[f"c{i}" for i in range(8)]]

        assert rank_missed_concepts(rows) == ["c0", "c1", "c2", "c3", "c4"]
        assert rank_missed_concepts(rows, limit=2) == ["c0", "c1"]

    def test_empty(self) -> None:
        """Test that no rows yield no concepts."""
        assert rank_missed_concepts([]) == []
