from __future__ import annotations

import time

from fastapi import FastAPI, HTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import GENERATE_EVENT, SEARCH_EVENT, get_events, record_event
from .catalog.data_store import get_catalog, get_recipe, ingredient_vocabulary
from .catalog.saved import DuplicateRecipeError, get_saved, save_recipe
from .llm.groq_client import GenerationUnavailableError, generate_recipe
from .matching.config import DEFAULT_MATCHING_CONFIG
from .matching.engine import find_matching_recipes
from .matching.errors import EmptyQueryError, InvalidConstraintError
from .matching.models import (
    Difficulty,
    GenerateRecipeRequest,
    MatchQuery,
    Recipe,
    RecipeMatchItem,
    RecipeMatchRequest,
    RecipeMatchResponse,
    SaveRecipeResponse,
)
from .matching.normalize import normalize_tokens

COMMON_INGREDIENTS = [
    "Rice", "Chicken", "Eggs", "Onions", "Garlic", "Tomatoes",
    "Cheese", "Bread", "Potatoes", "Pasta", "Spinach", "Bell Peppers",
    "Carrots", "Mushrooms", "Broccoli", "Ground Beef", "Salmon", "Beans",
]

app = FastAPI(title="Leftover Chef API", version="1.0.0")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "difficulties": [d.value for d in Difficulty],
        "dietary_restrictions": DEFAULT_MATCHING_CONFIG.restrictions,
        "common_ingredients": COMMON_INGREDIENTS,
        "catalog_ingredients": ingredient_vocabulary(),
    }


# ── Catalog endpoints ────────────────────────────────────────────────────


@app.get("/recipes", response_model=list[Recipe])
def list_recipes() -> list[Recipe]:
    return list(get_catalog())


@app.get("/recipes/saved", response_model=list[Recipe])
def list_saved() -> list[Recipe]:
    return list(get_saved())


@app.post("/recipes/saved", response_model=SaveRecipeResponse)
def save(body: Recipe) -> SaveRecipeResponse:
    try:
        save_recipe(body, reserved_ids=(r.id for r in get_catalog()))
    except DuplicateRecipeError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return SaveRecipeResponse(status="saved", total_saved=len(get_saved()))


@app.get("/recipes/{recipe_id}", response_model=Recipe)
def recipe_detail(recipe_id: str) -> Recipe:
    recipe = get_recipe(recipe_id)
    if recipe is None:
        for saved in get_saved():
            if saved.id == recipe_id:
                return saved
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


# ── Matching ─────────────────────────────────────────────────────────────


@app.post("/recipes/match", response_model=RecipeMatchResponse)
def match(body: RecipeMatchRequest) -> RecipeMatchResponse:
    start_time = time.time()

    query = MatchQuery(
        user_tokens=tuple(body.ingredients),
        difficulty=body.difficulty,
        max_prep_time_minutes=body.max_prep_time,
        dietary_restrictions=tuple(body.dietary),
    )
    snapshot = get_catalog()
    if body.include_saved:
        snapshot = snapshot + get_saved()

    try:
        results = find_matching_recipes(snapshot, query)
    except EmptyQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except InvalidConstraintError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    items = [
        RecipeMatchItem(
            recipe=r.recipe,
            match_count=r.match_count,
            matched_ingredients=list(r.matched_tokens),
            missing_ingredients=list(r.missing_tokens),
        )
        for r in results[: body.limit]
    ]
    ingredients = list(normalize_tokens(body.ingredients))

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event(SEARCH_EVENT, {
        "ingredients": ingredients,
        "difficulty": body.difficulty,
        "max_prep_time": body.max_prep_time,
        "dietary": body.dietary,
        "include_saved": body.include_saved,
        "total_candidates": len(results),
        "results_returned": len(items),
        "response_time_ms": elapsed_ms,
    })

    return RecipeMatchResponse(
        ingredients=ingredients,
        results=items,
        total_candidates=len(results),
    )


# ── Generation ───────────────────────────────────────────────────────────


@app.post("/recipes/generate", response_model=Recipe)
def generate(body: GenerateRecipeRequest) -> Recipe:
    try:
        recipe = generate_recipe(
            body.ingredients,
            dietary_restrictions=body.dietary,
            difficulty=body.difficulty,
            max_prep_time_minutes=body.max_prep_time,
        )
    except EmptyQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except InvalidConstraintError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except GenerationUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc))

    record_event(GENERATE_EVENT, {"recipe_id": recipe.id, "ingredients": body.ingredients})
    return recipe


# ── Analytics ────────────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
