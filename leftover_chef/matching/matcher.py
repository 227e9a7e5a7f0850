from __future__ import annotations

from typing import Sequence

from .models import Recipe

# One shared ingredient is enough to surface a recipe: recall over precision.
# Ranking by match count is what pushes the stronger overlaps to the top.
MIN_MATCH_COUNT = 1


def tokens_overlap(required: str, user_token: str) -> bool:
    """Bidirectional substring containment, e.g. "onion" vs "onions"."""
    return required in user_token or user_token in required


def matched_tokens(recipe: Recipe, user_tokens: Sequence[str]) -> tuple[str, ...]:
    """
    Return the recipe's required tokens covered by at least one user token.

    ``user_tokens`` must already be normalized and non-blank: an empty
    string is contained in every token and would match everything.
    """
    return tuple(
        required
        for required in recipe.required_tokens
        if any(tokens_overlap(required, u) for u in user_tokens)
    )


def match_count(recipe: Recipe, user_tokens: Sequence[str]) -> int:
    return len(matched_tokens(recipe, user_tokens))


def is_candidate(count: int) -> bool:
    return count >= MIN_MATCH_COUNT
