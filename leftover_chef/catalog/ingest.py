from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, List

import pandas as pd

from ..matching.models import RATING_MAX, RATING_MIN, Difficulty
from ..matching.normalize import normalize_tokens
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS: List[str] = [
    "id",
    "title",
    "description",
    "difficulty",
    "prep_time_minutes",
    "servings",
    "rating",
    "required_tokens",
    "ingredients",
    "instructions",
    "tags",
    "tips",
    "nutrition",
    "image_url",
]

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NA


def _as_list(value: Any) -> list:
    if _is_missing(value):
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [part for part in value.split(",") if part.strip()]
    return [value]


def _canonical_difficulty(value: Any) -> str | None:
    if _is_missing(value):
        return None
    tier = Difficulty.from_label(str(value))
    return tier.value if tier else None


def parse_positive_int(value: Any) -> int | None:
    if _is_missing(value):
        return None
    try:
        minutes = int(float(value))
    except (TypeError, ValueError):
        return None
    return minutes if minutes > 0 else None


def _normalize_rating(rating: Any) -> float | None:
    if _is_missing(rating):
        return None
    raw = str(rating).strip()
    # Handle "X/5" format (e.g. "4.1/5")
    if "/" in raw:
        raw = raw.split("/")[0].strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None

    return max(RATING_MIN, min(RATING_MAX, value))


def flatten_instructions(value: Any) -> list[str]:
    """Turn ``[{"step": 2, "instruction": ...}, ...]`` into ordered step strings."""
    steps: list[tuple[float, str]] = []
    for position, item in enumerate(_as_list(value)):
        if isinstance(item, dict):
            text = str(item.get("instruction", "")).strip()
            try:
                order = float(item.get("step", position + 1))
            except (TypeError, ValueError):
                order = float(position + 1)
        else:
            text = str(item).strip()
            order = float(position + 1)
        if text:
            steps.append((order, text))
    return [text for _, text in sorted(steps, key=lambda s: s[0])]


def _encode_tokens(value: Any) -> str:
    return json.dumps(list(normalize_tokens(str(t) for t in _as_list(value))))


def _encode_list(value: Any) -> str:
    return json.dumps([str(v).strip() for v in _as_list(value) if str(v).strip()])


def _encode_nutrition(value: Any) -> str:
    if isinstance(value, dict) and value:
        return json.dumps(value, sort_keys=True)
    return ""


def read_raw_recipes(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> pd.DataFrame:
    with config.raw_path.open("r", encoding="utf-8") as f:
        return pd.DataFrame(json.load(f))


def build_canonical_frame(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Map a raw recipe table onto :data:`CANONICAL_COLUMNS`.

    Column names are looked up from a few known aliases. Rows without a
    title, primary ingredients, a known difficulty or a positive prep time
    cannot be matched reliably and are dropped with a warning.
    """

    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in raw.columns:
                return col
        return None

    col_id = _first_present(["id", "recipe_id"])
    col_title = _first_present(["title", "name"])
    col_tokens = _first_present(["primary_ingredients", "required_tokens", "main_ingredients"])

    def _column(candidates: List[str], default: Any = None) -> pd.Series:
        col = _first_present(candidates)
        if col is None:
            return pd.Series([default] * len(raw), index=raw.index, dtype=object)
        return raw[col]

    canonical = pd.DataFrame(index=raw.index)
    fallback_ids = pd.Series([f"recipe-{i + 1}" for i in range(len(raw))], index=raw.index)
    if col_id:
        canonical["id"] = raw[col_id].where(raw[col_id].notna(), fallback_ids).astype(str)
    else:
        canonical["id"] = fallback_ids

    canonical["title"] = raw[col_title].fillna("").astype(str).str.strip() if col_title else ""
    canonical["description"] = _column(["description", "summary"], "").fillna("").astype(str)
    canonical["difficulty"] = _column(["difficulty", "level"]).apply(_canonical_difficulty)
    canonical["prep_time_minutes"] = _column(["prep_time_minutes", "prep_time", "cooking_time"]).apply(
        parse_positive_int
    )
    canonical["servings"] = _column(["servings", "serves"]).apply(parse_positive_int)
    canonical["rating"] = _column(["rating", "avg_rating"]).apply(_normalize_rating)
    canonical["required_tokens"] = raw[col_tokens].apply(_encode_tokens) if col_tokens else "[]"
    canonical["ingredients"] = _column(["ingredients"]).apply(_encode_list)
    canonical["instructions"] = _column(["instructions", "steps"]).apply(
        lambda v: json.dumps(flatten_instructions(v))
    )
    canonical["tags"] = _column(["tags"]).apply(_encode_list)
    canonical["tips"] = _column(["tips"], "").fillna("").astype(str)
    canonical["nutrition"] = _column(["nutrition"]).apply(_encode_nutrition)
    canonical["image_url"] = _column(["image_url", "image"], "").fillna("").astype(str)

    valid = (
        (canonical["title"] != "")
        & (canonical["required_tokens"] != "[]")
        & canonical["difficulty"].notna()
        & canonical["prep_time_minutes"].notna()
    )
    if not valid.all():
        logger.warning(
            "Dropping %d recipe(s) that cannot be matched: %s",
            int((~valid).sum()),
            ", ".join(canonical.loc[~valid, "id"].tolist()),
        )
    canonical = canonical.loc[valid].copy()
    canonical["prep_time_minutes"] = canonical["prep_time_minutes"].astype(int)

    duplicated = canonical["id"].duplicated()
    if duplicated.any():
        logger.warning(
            "Dropping %d recipe(s) with duplicate ids: %s",
            int(duplicated.sum()),
            ", ".join(canonical.loc[duplicated, "id"].tolist()),
        )
        canonical = canonical.loc[~duplicated]

    return canonical[CANONICAL_COLUMNS].reset_index(drop=True)


def run_ingestion(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Path:
    """
    Execute the catalog ingestion pipeline.

    Steps:
    - Read the raw recipe JSON file.
    - Map raw fields into the canonical recipe table.
    - Persist the table as CSV for the data store.
    """
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    canonical = build_canonical_frame(read_raw_recipes(config))

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d recipes to %s", len(canonical), output_path)
    return output_path


if __name__ == "__main__":
    path = run_ingestion()
    print(f"Ingestion complete. Processed catalog saved to: {path}")
