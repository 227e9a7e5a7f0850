from __future__ import annotations

from typing import Iterable, Mapping

from .models import ANY_DIFFICULTY, Difficulty, MatchQuery, Recipe
from .normalize import normalize_token


def excluded_tokens(
    restrictions: Iterable[str],
    exclusions: Mapping[str, frozenset[str]],
) -> frozenset[str]:
    """Union of the excluded-token sets for the given restriction keywords.

    Unknown keywords contribute nothing; the engine rejects them before
    filtering ever runs.
    """
    combined: set[str] = set()
    for keyword in restrictions:
        combined |= exclusions.get(normalize_token(keyword), frozenset())
    return frozenset(normalize_token(t) for t in combined)


def is_excluded_by_diet(recipe: Recipe, excluded: frozenset[str]) -> bool:
    # Exact token equality, not substring: "eggplant" is not "eggs".
    return any(normalize_token(t) in excluded for t in recipe.required_tokens)


def _passes_duration(recipe: Recipe, ceiling: int | None) -> bool:
    return ceiling is None or recipe.prep_time_minutes <= ceiling


def _passes_difficulty(recipe: Recipe, wanted: Difficulty | str | None) -> bool:
    if wanted is None or wanted == ANY_DIFFICULTY:
        return True
    return recipe.difficulty == wanted


def passes(
    recipe: Recipe,
    query: MatchQuery,
    excluded: frozenset[str] = frozenset(),
) -> bool:
    """
    Apply every hard constraint in ``query`` to ``recipe``.

    Cheapest checks first: prep time, difficulty, then the dietary scan
    against ``excluded`` (see :func:`excluded_tokens`). ``query.difficulty``
    is expected to be a :class:`Difficulty`, ``"any"`` or ``None``.
    """
    return (
        _passes_duration(recipe, query.max_prep_time_minutes)
        and _passes_difficulty(recipe, query.difficulty)
        and not is_excluded_by_diet(recipe, excluded)
    )
