from __future__ import annotations

from typing import Iterable

from ..matching.models import Recipe

_saved: list[Recipe] = []


class DuplicateRecipeError(ValueError):
    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe {recipe_id!r} already exists")
        self.recipe_id = recipe_id


def save_recipe(recipe: Recipe, reserved_ids: Iterable[str] = ()) -> None:
    """Keep ``recipe``; its id may not clash with a saved or reserved one."""
    taken = set(reserved_ids) | {r.id for r in _saved}
    if recipe.id in taken:
        raise DuplicateRecipeError(recipe.id)
    _saved.append(recipe)


def get_saved() -> tuple[Recipe, ...]:
    return tuple(_saved)


def clear_saved() -> None:
    _saved.clear()
