from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .errors import EmptyQueryError, InvalidConstraintError
from .filters import excluded_tokens, passes
from .matcher import is_candidate, matched_tokens
from .models import ANY_DIFFICULTY, Difficulty, MatchQuery, MatchResult, Recipe
from .normalize import normalize_token, normalize_tokens
from .ranker import rank

logger = logging.getLogger(__name__)


def resolve_difficulty(value: Difficulty | str | None) -> Difficulty | str | None:
    if value is None or isinstance(value, Difficulty):
        return value
    if not isinstance(value, str):
        raise InvalidConstraintError("difficulty", f"expected a string, got {type(value).__name__}")
    if normalize_token(value) == ANY_DIFFICULTY:
        return ANY_DIFFICULTY
    tier = Difficulty.from_label(value)
    if tier is None:
        allowed = ", ".join(t.value for t in Difficulty)
        raise InvalidConstraintError(
            "difficulty", f"unknown tier {value!r} (expected one of {allowed} or 'any')"
        )
    return tier


def _resolve_max_prep_time(value: int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConstraintError("max_prep_time_minutes", "must be a whole number of minutes")
    if value <= 0:
        raise InvalidConstraintError("max_prep_time_minutes", f"must be positive, got {value}")
    return value


def _resolve_restrictions(values: Iterable[str] | None, config: MatchingConfig) -> tuple[str, ...]:
    if values is None:
        return ()
    values = (values,) if isinstance(values, str) else tuple(values)
    if any(not isinstance(v, str) for v in values):
        raise InvalidConstraintError("dietary_restrictions", "every restriction must be a string")
    keywords = normalize_tokens(values)
    unknown = [k for k in keywords if k not in config.dietary_exclusions]
    if unknown:
        raise InvalidConstraintError(
            "dietary_restrictions",
            f"unsupported restriction(s) {', '.join(unknown)}; "
            f"supported: {', '.join(config.restrictions)}",
        )
    return keywords


def validate_query(query: MatchQuery, config: MatchingConfig = DEFAULT_MATCHING_CONFIG) -> MatchQuery:
    """
    Check ``query`` and return a canonical copy of it.

    The copy has normalized, de-duplicated tokens and restriction keywords
    and a :class:`Difficulty` (or ``"any"``/``None``) difficulty.
    """
    raw_tokens = query.user_tokens or ()
    if isinstance(raw_tokens, str):
        raw_tokens = (raw_tokens,)
    if any(not isinstance(t, str) for t in raw_tokens):
        raise InvalidConstraintError("user_tokens", "every ingredient must be a string")
    tokens = normalize_tokens(raw_tokens)
    if not tokens:
        raise EmptyQueryError()

    return replace(
        query,
        user_tokens=tokens,
        difficulty=resolve_difficulty(query.difficulty),
        max_prep_time_minutes=_resolve_max_prep_time(query.max_prep_time_minutes),
        dietary_restrictions=_resolve_restrictions(query.dietary_restrictions, config),
    )


def find_matching_recipes(
    catalog: Iterable[Recipe],
    query: MatchQuery,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> tuple[MatchResult, ...]:
    """
    Match, filter and rank ``catalog`` against ``query``.

    Raises ``EmptyQueryError`` or ``InvalidConstraintError`` before the
    catalog is touched. An empty tuple means nothing matched, which is a
    normal outcome. Neither argument is modified.
    """
    resolved = validate_query(query, config)
    excluded = excluded_tokens(resolved.dietary_restrictions, config.dietary_exclusions)

    survivors: list[MatchResult] = []
    scanned = 0
    for recipe in catalog:
        scanned += 1
        matched = matched_tokens(recipe, resolved.user_tokens)
        if not is_candidate(len(matched)):
            continue
        if not passes(recipe, resolved, excluded):
            continue
        survivors.append(MatchResult(
            recipe=recipe,
            match_count=len(matched),
            matched_tokens=matched,
            missing_tokens=tuple(t for t in recipe.required_tokens if t not in matched),
        ))

    logger.debug(
        "Matched %d of %d recipes for %d ingredient(s)",
        len(survivors), scanned, len(resolved.user_tokens),
    )
    return rank(survivors)
