from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

_MEAT = frozenset({"chicken", "beef", "pork", "fish", "meat"})

DEFAULT_DIETARY_EXCLUSIONS: Mapping[str, frozenset[str]] = MappingProxyType({
    "vegetarian": _MEAT,
    "vegan": _MEAT | {"cheese", "eggs"},
})


@dataclass(frozen=True)
class MatchingConfig:
    """
    Injected settings for the matching engine.

    ``dietary_exclusions`` maps a restriction keyword (lower-case) to the
    primary-ingredient tokens that disqualify a recipe under it.
    """

    dietary_exclusions: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: DEFAULT_DIETARY_EXCLUSIONS
    )

    @property
    def restrictions(self) -> list[str]:
        return sorted(self.dietary_exclusions)


DEFAULT_MATCHING_CONFIG = MatchingConfig()
