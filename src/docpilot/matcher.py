"""Closest-URL suggestions for index misses.

Pure business logic, no knowledge of AppState or I/O. Candidate sets are the
indexed URLs (hundreds, not millions) and the search only runs on a miss, so
a linear scan is fine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rapidfuzz.distance import Levenshtein

if TYPE_CHECKING:
    from collections.abc import Iterable


def edit_distance(a: str, b: str) -> int:
    """Classic Levenshtein distance: insert, delete and substitute all cost 1."""
    return Levenshtein.distance(a, b)


def closest(target: str, candidates: Iterable[str]) -> tuple[str, int] | None:
    """Return ``(candidate, distance)`` with the smallest distance to ``target``.

    Ties go to the first candidate in iteration order. Returns None when
    there are no candidates.
    """
    best: tuple[str, int] | None = None
    for candidate in candidates:
        distance = edit_distance(target, candidate)
        if best is None or distance < best[1]:
            best = (candidate, distance)
            if distance == 0:
                break
    return best


def suggestion_tolerance(target: str, *, min_distance: int = 5, ratio: float = 0.1) -> int:
    """Largest distance still treated as a likely typo of ``target``."""
    return max(min_distance, int(len(target) * ratio))


def suggest_url(
    target: str,
    candidates: Iterable[str],
    *,
    min_distance: int = 5,
    ratio: float = 0.1,
) -> str | None:
    """Return the closest candidate if it is within the typo tolerance."""
    match = closest(target, candidates)
    if match is None:
        return None
    url, distance = match
    if distance <= suggestion_tolerance(target, min_distance=min_distance, ratio=ratio):
        return url
    return None
