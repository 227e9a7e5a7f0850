from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Iterable

from groq import Groq

from ..catalog.ingest import flatten_instructions, parse_positive_int
from ..matching.engine import resolve_difficulty
from ..matching.errors import EmptyQueryError
from ..matching.models import Difficulty, Recipe
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

DEFAULT_PREP_TIME_MINUTES = 30

SYSTEM_PROMPT = (
    "You are a creative chef specializing in transforming leftovers into "
    "delicious meals. Always respond with valid JSON only."
)


class GenerationUnavailableError(RuntimeError):
    """Recipe generation is switched off or has no API key."""


def _build_user_message(
    ingredients: list[str],
    dietary_restrictions: list[str],
    difficulty: Difficulty | None,
    max_prep_time_minutes: int | None,
) -> str:
    lines = [f"Create a detailed recipe using these leftover ingredients: {', '.join(ingredients)}."]
    lines.append("\n## Requirements")
    lines.append(f"- Dietary restrictions: {', '.join(dietary_restrictions) or 'None'}")
    lines.append(f"- Difficulty level: {(difficulty or Difficulty.medium).value}")
    lines.append(f"- Maximum prep time: {max_prep_time_minutes or DEFAULT_PREP_TIME_MINUTES} minutes")
    lines.append("- Focus on reducing food waste and using leftovers creatively")
    lines.append("- Make it delicious and practical for home cooking")

    lines.append("\n## Response format")
    lines.append("Return ONLY valid JSON in this exact format:")
    lines.append(json.dumps({
        "title": "Recipe name",
        "description": "Brief appetizing description",
        "prep_time_minutes": 25,
        "servings": 2,
        "difficulty": "Easy|Medium|Hard",
        "primary_ingredients": ["main ingredient 1", "main ingredient 2"],
        "ingredients": ["ingredient 1", "ingredient 2"],
        "instructions": [
            {"step": 1, "instruction": "Step 1 description"},
            {"step": 2, "instruction": "Step 2 description"},
        ],
        "tags": ["tag1", "tag2"],
        "tips": "Helpful cooking tips or variations",
    }, indent=2))

    return "\n".join(lines)


def _new_recipe_id() -> str:
    return f"generated-{uuid.uuid4().hex[:12]}"


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v).strip() for v in value if str(v).strip())


def fallback_recipe(
    ingredients: list[str],
    difficulty: Difficulty | None = None,
    max_prep_time_minutes: int | None = None,
) -> Recipe:
    """Template recipe used when the LLM answer cannot be turned into a Recipe."""
    listed = ", ".join(ingredients)
    return Recipe(
        id=_new_recipe_id(),
        title=f"Leftover {ingredients[0]} Creation",
        description=f"A delicious recipe using {listed}",
        prep_time_minutes=max_prep_time_minutes or DEFAULT_PREP_TIME_MINUTES,
        servings=4,
        difficulty=difficulty or Difficulty.medium,
        required_tokens=tuple(ingredients),
        ingredients=tuple(ingredients),
        instructions=(
            f"Prepare your {listed} by cleaning and chopping as needed.",
            "Heat oil in a large pan and add your ingredients.",
            "Cook until heated through and flavors are combined.",
            "Season to taste and serve hot.",
        ),
        tags=("leftovers", "quick", "easy"),
        tips="Feel free to add your favorite seasonings and spices to enhance flavor!",
    )


def _parse_recipe(
    content: str,
    ingredients: list[str],
    difficulty: Difficulty | None,
    max_prep_time_minutes: int | None,
) -> Recipe:
    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise ValueError("LLM response is not a JSON object")
    data = parsed.get("recipe", parsed)

    generated_tier = Difficulty.from_label(str(data.get("difficulty", "")))
    return Recipe(
        id=_new_recipe_id(),
        title=str(data["title"]).strip(),
        description=str(data.get("description", "")).strip(),
        prep_time_minutes=(
            parse_positive_int(data.get("prep_time_minutes"))
            or max_prep_time_minutes
            or DEFAULT_PREP_TIME_MINUTES
        ),
        servings=parse_positive_int(data.get("servings")),
        difficulty=generated_tier or difficulty or Difficulty.medium,
        required_tokens=_string_list(data.get("primary_ingredients")) or tuple(ingredients),
        ingredients=_string_list(data.get("ingredients")) or tuple(ingredients),
        instructions=tuple(flatten_instructions(data.get("instructions"))),
        tags=_string_list(data.get("tags")),
        tips=str(data["tips"]).strip() if data.get("tips") else None,
    )


def generate_recipe(
    ingredients: Iterable[str],
    dietary_restrictions: Iterable[str] = (),
    difficulty: str | None = None,
    max_prep_time_minutes: int | None = None,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> Recipe:
    """
    Ask the Groq LLM for one recipe built around ``ingredients``.

    Raises ``EmptyQueryError`` without usable ingredients,
    ``InvalidConstraintError`` for an unknown difficulty and
    ``GenerationUnavailableError`` when generation is not configured.
    Any failure after that (API error, bad JSON, wrong shape) is logged
    and answered with :func:`fallback_recipe`, or raised as
    ``GenerationUnavailableError`` when ``config.fallback_on_error`` is off.
    """
    items = [i.strip() for i in ingredients if i and i.strip()]
    if not items:
        raise EmptyQueryError()

    resolved = resolve_difficulty(difficulty)
    tier = resolved if isinstance(resolved, Difficulty) else None

    if not config.enabled or not config.api_key:
        raise GenerationUnavailableError("Recipe generation is not configured")

    restrictions = [r.strip() for r in dietary_restrictions if r and r.strip()]

    try:
        client = Groq(
            api_key=config.api_key,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": _build_user_message(items, restrictions, tier, max_prep_time_minutes),
                },
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        return _parse_recipe(content, items, tier, max_prep_time_minutes)

    except Exception as exc:
        if not config.fallback_on_error:
            raise GenerationUnavailableError("Recipe generation failed") from exc
        logger.warning("Groq recipe generation failed, using fallback recipe", exc_info=True)
        return fallback_recipe(items, tier, max_prep_time_minutes)
