from __future__ import annotations

from typing import Iterable

from .models import MatchResult


def _sort_key(result: MatchResult) -> tuple[int, float, str]:
    return (-result.match_count, -result.recipe.quality_score, result.recipe.id)


def rank(results: Iterable[MatchResult]) -> tuple[MatchResult, ...]:
    """
    Order results by match count, then rating (both descending), then id.

    A missing rating ranks as the lowest possible score. The id tie-break
    keeps the order independent of catalog iteration order.
    """
    return tuple(sorted(results, key=_sort_key))
