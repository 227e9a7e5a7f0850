from __future__ import annotations

from collections import Counter
from typing import Any

from ..matching.models import Difficulty
from ..matching.normalize import normalize_token
from .store import GENERATE_EVENT, SEARCH_EVENT


def _difficulty_label(value: str) -> str:
    tier = Difficulty.from_label(value)
    return tier.value if tier else normalize_token(value)


def _rate(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == SEARCH_EVENT]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top ingredients
    ingredient_counter: Counter[str] = Counter()
    for s in searches:
        for i in s.get("ingredients", []) or []:
            ingredient_counter[i] += 1
    top_ingredients = [{"name": n, "count": c} for n, c in ingredient_counter.most_common(10)]

    # Difficulty usage
    difficulty_counter: Counter[str] = Counter()
    for s in searches:
        if s.get("difficulty"):
            difficulty_counter[_difficulty_label(s["difficulty"])] += 1

    # Filter usage rates
    filter_counts = {"difficulty": 0, "max_prep_time": 0, "dietary": 0, "include_saved": 0}
    for s in searches:
        if s.get("difficulty"):
            filter_counts["difficulty"] += 1
        if s.get("max_prep_time"):
            filter_counts["max_prep_time"] += 1
        if s.get("dietary"):
            filter_counts["dietary"] += 1
        if s.get("include_saved"):
            filter_counts["include_saved"] += 1
    filter_usage = {k: _rate(v, total) for k, v in filter_counts.items()}

    no_results = sum(1 for s in searches if s.get("total_candidates", 0) == 0)

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_ingredients": top_ingredients,
        "difficulty_usage": dict(difficulty_counter),
        "filter_usage": filter_usage,
        "no_result_rate": _rate(no_results, total),
        "recipes_generated": sum(1 for e in events if e["type"] == GENERATE_EVENT),
    }
