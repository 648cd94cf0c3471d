# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pure aggregation helpers for quiz statistics."""

from typing import Iterable

# Ledger rows (newest first) scanned for missed concepts.
MISSED_CONCEPT_WINDOW = 10
TOP_MISSED_CONCEPTS = 5
RECENT_SCORES = 5


def rank_missed_concepts(
    rows: Iterable[Iterable[str]],
    limit: int = TOP_MISSED_CONCEPTS,
) -> list[str]:
    """Rank concepts by how often they were missed.

    Args:
        rows: Missed concept lists, newest ledger entry first.
        limit: Number of concepts to return.

    Returns:
        Most frequent concepts first. Ties keep the order in which the
        concepts were first encountered.
    """
    counts: dict[str, int] = {}
    for concepts in rows:
        for concept in concepts:
            counts[concept] = counts.get(concept, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [concept for concept, _ in ranked[:limit]]
