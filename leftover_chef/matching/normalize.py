from __future__ import annotations

from typing import Iterable


def normalize_token(token: str) -> str:
    """Lower-case and trim a single ingredient token."""
    return token.strip().lower()


def normalize_tokens(tokens: Iterable[str]) -> tuple[str, ...]:
    """Normalize tokens, dropping blanks and repeats (first occurrence wins)."""
    seen: dict[str, None] = {}
    for token in tokens:
        norm = normalize_token(token)
        if norm and norm not in seen:
            seen[norm] = None
    return tuple(seen)
