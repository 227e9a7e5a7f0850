from __future__ import annotations

import json
from typing import Any

import pandas as pd

from ..matching.models import Nutrition, Recipe
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .ingest import build_canonical_frame, read_raw_recipes

# Keyed by config so each catalog location is loaded once
_frames: dict[CatalogConfig, pd.DataFrame] = {}
_catalogs: dict[CatalogConfig, tuple[Recipe, ...]] = {}


def _parse_json_list(value: Any) -> list[str]:
    if not isinstance(value, str) or not value:
        return []
    return [str(v) for v in json.loads(value)]


def _text(value: Any) -> str | None:
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _load(config: CatalogConfig) -> pd.DataFrame:
    if config.processed_path.exists():
        df = pd.read_csv(config.processed_path, dtype={"id": str})
    else:
        df = build_canonical_frame(read_raw_recipes(config))

    # Pre-parse list columns once so snapshots and metadata share them
    for col in ("required_tokens", "ingredients", "instructions", "tags"):
        df[f"{col}_list"] = df[col].apply(_parse_json_list)

    return df


def _row_to_recipe(row: pd.Series) -> Recipe:
    nutrition = row.get("nutrition")
    servings = row.get("servings")
    return Recipe(
        id=str(row["id"]),
        title=str(row["title"]),
        description=_text(row.get("description")) or "",
        difficulty=row["difficulty"],
        prep_time_minutes=int(row["prep_time_minutes"]),
        servings=int(servings) if pd.notna(servings) else None,
        rating=float(row["rating"]) if pd.notna(row.get("rating")) else None,
        required_tokens=tuple(row["required_tokens_list"]),
        ingredients=tuple(row["ingredients_list"]),
        instructions=tuple(row["instructions_list"]),
        tags=tuple(row["tags_list"]),
        tips=_text(row.get("tips")),
        nutrition=Nutrition(**json.loads(nutrition)) if isinstance(nutrition, str) and nutrition else None,
        image_url=_text(row.get("image_url")),
    )


def get_dataframe(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> pd.DataFrame:
    """Return the in-memory recipe table, loading it on first call for ``config``."""
    if config not in _frames:
        _frames[config] = _load(config)
    return _frames[config]


def get_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> tuple[Recipe, ...]:
    """Return the catalog as an immutable snapshot of recipes."""
    if config not in _catalogs:
        df = get_dataframe(config)
        _catalogs[config] = tuple(_row_to_recipe(row) for _, row in df.iterrows())
    return _catalogs[config]


def get_recipe(recipe_id: str, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Recipe | None:
    for recipe in get_catalog(config):
        if recipe.id == recipe_id:
            return recipe
    return None


def ingredient_vocabulary(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> list[str]:
    """Sorted distinct primary ingredients across the catalog."""
    tokens = get_dataframe(config)["required_tokens_list"].explode().dropna()
    return sorted(tokens.unique().tolist())


def reset_data_store() -> None:
    _frames.clear()
    _catalogs.clear()
