from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .normalize import normalize_tokens

RATING_MIN = 0.0
RATING_MAX = 5.0
ANY_DIFFICULTY = "any"


class Difficulty(str, Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"

    @classmethod
    def from_label(cls, label: str) -> Difficulty | None:
        """Case-insensitive lookup; ``None`` for anything that is not a tier."""
        wanted = label.strip().lower()
        for tier in cls:
            if tier.value.lower() == wanted:
                return tier
        return None


class Nutrition(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)


class Recipe(BaseModel):
    """A catalog entry. Only the token, difficulty, time and rating fields drive matching."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    required_tokens: tuple[str, ...] = Field(
        default=(),
        description="Primary ingredients used for matching",
    )
    difficulty: Difficulty = Difficulty.medium
    prep_time_minutes: int = Field(..., gt=0)
    rating: float | None = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    description: str = ""
    servings: int | None = Field(default=None, ge=1)
    ingredients: tuple[str, ...] = ()
    instructions: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    tips: str | None = None
    nutrition: Nutrition | None = None
    image_url: str | None = None

    @field_validator("required_tokens")
    @classmethod
    def _normalize_required_tokens(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return normalize_tokens(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _parse_difficulty(cls, value: object) -> object:
        if isinstance(value, str) and not isinstance(value, Difficulty):
            return Difficulty.from_label(value) or value
        return value

    @property
    def quality_score(self) -> float:
        return RATING_MIN if self.rating is None else self.rating


@dataclass(frozen=True)
class MatchQuery:
    """What the user has and what they will accept.

    ``difficulty``, ``max_prep_time_minutes`` and ``dietary_restrictions``
    use ``None`` for "no constraint"; ``difficulty`` also accepts the
    literal ``"any"``.
    """

    user_tokens: tuple[str, ...]
    difficulty: Difficulty | str | None = None
    max_prep_time_minutes: int | None = None
    dietary_restrictions: tuple[str, ...] | None = field(default_factory=tuple)


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    recipe: Recipe
    match_count: int = Field(..., ge=1)
    matched_tokens: tuple[str, ...] = ()
    missing_tokens: tuple[str, ...] = ()


# ── API schemas ──────────────────────────────────────────────────────────


class RecipeMatchRequest(BaseModel):
    ingredients: list[str] = Field(
        default_factory=list,
        description='Ingredients on hand, e.g. ["rice", "eggs"]',
    )
    difficulty: str | None = Field(
        default=None, description='"Easy", "Medium", "Hard" or "any"'
    )
    max_prep_time: int | None = Field(
        default=None, description="Maximum preparation time in minutes"
    )
    dietary: list[str] = Field(
        default_factory=list,
        description='Dietary restrictions, e.g. ["vegetarian"]',
    )
    include_saved: bool = False
    limit: int = Field(default=10, ge=1, le=50)


class RecipeMatchItem(BaseModel):
    recipe: Recipe
    match_count: int
    matched_ingredients: list[str]
    missing_ingredients: list[str]


class RecipeMatchResponse(BaseModel):
    ingredients: list[str]
    results: list[RecipeMatchItem]
    total_candidates: int


class GenerateRecipeRequest(BaseModel):
    ingredients: list[str] = Field(default_factory=list)
    dietary: list[str] = Field(default_factory=list)
    difficulty: str | None = None
    max_prep_time: int | None = Field(default=None, gt=0)


class SaveRecipeResponse(BaseModel):
    status: str
    total_saved: int
