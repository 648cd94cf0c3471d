# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pure scoring rules for the knowledge model.

Quiz results move mastery by exponential smoothing so a single quiz
outcome cannot swing it far. Rounding is half-up on exact decimals
(57.5 becomes 58).

Example:
    >>> weighted_mastery(40, 100)
    58
    >>> is_weak(60, 49)
    True
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

PRIOR_WEIGHT = Decimal("0.7")
SCORE_WEIGHT = Decimal("0.3")

WEAK_MASTERY_THRESHOLD = 60
WEAK_CONFIDENCE_THRESHOLD = 50

# Mastery recorded for a topic explained through a multi-step plan.
PLAN_LEARNED_MASTERY = 50

MIN_LEVEL = 0
MAX_LEVEL = 100

Number = Union[int, float, Decimal]


def clamp_level(value: int) -> int:
    """Clamp a mastery/confidence level to [0, 100]."""
    return max(MIN_LEVEL, min(MAX_LEVEL, value))


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def weighted_mastery(prior: int, score: int) -> int:
    """Blend a prior mastery with a new quiz score.

    Returns:
        round(prior * 0.7 + score * 0.3), clamped to [0, 100].
    """
    blended = Decimal(prior) * PRIOR_WEIGHT + Decimal(score) * SCORE_WEIGHT
    return clamp_level(round_half_up(blended))


def quiz_mastery(prior: Optional[int], score: int) -> int:
    """Mastery after a quiz: the score itself for a new entry, else the blend."""
    if prior is None:
        return clamp_level(score)
    return weighted_mastery(prior, score)


def merge_weak_areas(prior: Iterable[str], missed: Iterable[str]) -> list[str]:
    """Union of two label lists without duplicates, first occurrence wins."""
    merged: list[str] = []
    seen: set[str] = set()
    for label in (*prior, *missed):
        if label not in seen:
            seen.add(label)
            merged.append(label)
    return merged


def is_weak(mastery: int, confidence: int) -> bool:
    """Check if an entry needs review."""
    return mastery < WEAK_MASTERY_THRESHOLD or confidence < WEAK_CONFIDENCE_THRESHOLD
