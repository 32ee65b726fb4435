from __future__ import annotations

from typing import Iterable, List, Optional

from .domain_models import Recipe

ALL_CATEGORIES = "all"


def matches_search(recipe: Recipe, search: str) -> bool:
    """Búsqueda case-insensitive en título, descripción e ingredientes."""
    term = search.lower()
    if term in recipe.title.lower():
        return True
    if recipe.description and term in recipe.description.lower():
        return True
    return any(term in ingredient.lower() for ingredient in recipe.ingredients)


def filter_recipes(
    recipes: Iterable[Recipe],
    search: Optional[str] = None,
    category: Optional[str] = ALL_CATEGORIES,
) -> List[Recipe]:
    """
    Filtra el listado de recetas. Conserva el orden de entrada.

    - `search` vacío o None: no filtra por texto.
    - `category` "all" (o vacío): no filtra por categoría; si no, match exacto.
    """
    filtered = list(recipes)

    term = (search or "").strip()
    if term:
        filtered = [r for r in filtered if matches_search(r, term)]

    if category and category != ALL_CATEGORIES:
        filtered = [r for r in filtered if r.category == category]

    return filtered
