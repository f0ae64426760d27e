"""Fuzzy "did you mean" matching based on Levenshtein distance."""

from __future__ import annotations

import math
from collections.abc import Iterable

DEFAULT_MAX_DISTANCE_RATIO = 0.4


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between ``a`` and ``b`` (insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def find_similar(
    target: str,
    candidates: Iterable[str],
    max_distance_ratio: float = DEFAULT_MAX_DISTANCE_RATIO,
    max_suggestions: int = 3,
) -> list[str]:
    """Rank candidates within ``ceil(len(target) * max_distance_ratio)`` edits.

    Closest first; equal distances are ordered lexicographically so output
    does not depend on the iteration order of ``candidates``.
    """
    max_distance = math.ceil(len(target) * max_distance_ratio)
    scored = []
    for candidate in set(candidates):
        distance = levenshtein_distance(target, candidate)
        if distance <= max_distance:
            scored.append((distance, candidate))
    scored.sort()
    return [candidate for _, candidate in scored[:max_suggestions]]


def find_best_match(
    target: str,
    candidates: Iterable[str],
    max_distance_ratio: float = DEFAULT_MAX_DISTANCE_RATIO,
) -> str | None:
    """Single best suggestion for ``target``, or None if nothing is close enough."""
    matches = find_similar(target, candidates, max_distance_ratio, max_suggestions=1)
    return matches[0] if matches else None


def format_suggestions(suggestions: list[str]) -> str:
    if not suggestions:
        return ""
    lines = ["Did you mean one of these?"]
    lines.extend(f"  - {s}" for s in suggestions)
    return "\n".join(lines)
