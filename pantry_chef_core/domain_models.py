from __future__ import annotations

"""
pantry_chef_core.domain_models
==============================

Modelos de dominio usados a lo largo de la app.

Hay dos familias:

- Modelos **transitorios** que vienen del modelo de IA (`DetectedIngredient`,
  `GeneratedRecipe`). Son pydantic porque la respuesta del LLM se valida
  contra un esquema estricto antes de usarse (ver `parsing.py`).
- Registros **persistidos** en Supabase (`Recipe`, `Favorite`,
  `IngredientQuery`). Son dataclasses simples, construidas desde las filas
  que devuelve PostgREST (`from_row`).

Principios de diseño
--------------------
- Este módulo NO habla con OpenAI, Supabase ni HTTP.
- El orden de `ingredients` y `steps` es significativo y se preserva siempre.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


RECIPE_CATEGORIES = ("main dish", "appetizer", "dessert", "side dish")
"""Categorías que se le piden al modelo. La columna es texto libre."""


# ============================================================
# Transitorios (respuesta del modelo)
# ============================================================

class DetectedIngredient(BaseModel):
    """
    Ingrediente reconocido en una foto.

    Solo `name` se persiste (en `ingredient_queries.recognized_ingredients`).
    """

    name: str = Field(..., min_length=1)
    confidence: float = Field(..., ge=0.0, le=1.0)


class GeneratedRecipe(BaseModel):
    """
    Receta propuesta por el modelo de texto.

    En el wire se usa `estimatedTime` (camelCase), igual que en el JSON que
    se le pide al modelo; internamente es `estimated_time`.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    ingredients: List[str]
    steps: List[str]
    category: str
    estimated_time: str = Field(..., alias="estimatedTime")
    servings: int

    def to_recipe_row(self) -> Dict[str, Any]:
        """Fila lista para insertar en la tabla `recipes`."""
        return {
            "title": self.title,
            "description": self.description,
            "ingredients": list(self.ingredients),
            "steps": list(self.steps),
            "category": self.category,
            "estimated_time": self.estimated_time,
            "servings": self.servings,
        }


# ============================================================
# Persistidos (tablas de Supabase)
# ============================================================

@dataclass
class Recipe:
    """
    Fila de la tabla `recipes`.

    `id` lo genera la base al insertar; es la única identidad válida
    (el título no es único).
    """
    id: str
    title: str
    description: str = ""
    ingredients: List[str] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)
    category: str = ""
    estimated_time: Optional[str] = None
    servings: Optional[int] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Recipe":
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            description=row.get("description") or "",
            ingredients=list(row.get("ingredients") or []),
            steps=list(row.get("steps") or []),
            category=row.get("category") or "",
            estimated_time=row.get("estimated_time"),
            servings=row.get("servings"),
            image_url=row.get("image_url"),
            created_at=row.get("created_at"),
        )


@dataclass
class Favorite:
    """
    Fila de la tabla `favorites` (join usuario ↔ receta).

    `recipe` viene embebida cuando se consulta con `recipe:recipes(*)`.
    """
    id: str
    user_id: str
    recipe_id: str
    created_at: Optional[str] = None
    recipe: Optional[Recipe] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Favorite":
        embedded = row.get("recipe")
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            recipe_id=str(row["recipe_id"]),
            created_at=row.get("created_at"),
            recipe=Recipe.from_row(embedded) if embedded else None,
        )


@dataclass
class IngredientQuery:
    """Registro (append-only) de cada análisis de foto."""
    id: str
    user_id: str
    image_url: str
    recognized_ingredients: List[str] = field(default_factory=list)
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "IngredientQuery":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            image_url=row.get("image_url") or "",
            recognized_ingredients=list(row.get("recognized_ingredients") or []),
            created_at=row.get("created_at"),
        )


@dataclass
class ProfileSummary:
    """Datos que muestra la página de perfil."""
    query_count: int
    favorite_count: int
    recent_queries: List[IngredientQuery] = field(default_factory=list)
