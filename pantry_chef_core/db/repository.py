"""
Acceso a datos sobre las tablas de Supabase.

Tablas:
- recipes: recetas generadas (una fila por receta, id generado por la base)
- favorites: join (user_id, recipe_id)
- ingredient_queries: log append-only de análisis de fotos

Todas las identidades son ids generados al persistir; nunca se busca una
receta por título para favoritearla.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Set

from supabase import Client

from ..domain_models import (
    Favorite,
    GeneratedRecipe,
    IngredientQuery,
    ProfileSummary,
    Recipe,
)
from ..errors import NotFoundError, RepositoryError

logger = logging.getLogger(__name__)

RECIPES_TABLE = "recipes"
FAVORITES_TABLE = "favorites"
QUERIES_TABLE = "ingredient_queries"


def _execute(query: Any, action: str):
    """Ejecuta un query builder de PostgREST y normaliza los errores."""
    try:
        return query.execute()
    except Exception as e:
        logger.exception(f"Error en Supabase ({action}): {e}")
        raise RepositoryError(f"Database operation failed: {action}") from e


class PantryRepository:
    """Operaciones de datos que antes hacían las páginas directamente."""

    def __init__(self, client: Client):
        self.client = client

    # ------------------------------------------------------------
    # Recetas
    # ------------------------------------------------------------

    def save_generated_recipes(self, recipes: Sequence[GeneratedRecipe]) -> List[Recipe]:
        """
        Persiste todas las recetas en un solo INSERT.

        PostgREST ejecuta el insert de un array como una única sentencia:
        o se guardan todas o ninguna.
        """
        if not recipes:
            return []

        rows = [r.to_recipe_row() for r in recipes]
        response = _execute(
            self.client.table(RECIPES_TABLE).insert(rows),
            "insert recipes",
        )
        saved = [Recipe.from_row(row) for row in (response.data or [])]
        logger.info(f"💾 {len(saved)} recetas guardadas")
        return saved

    def list_recipes(self) -> List[Recipe]:
        response = _execute(
            self.client.table(RECIPES_TABLE).select("*").order("created_at", desc=True),
            "list recipes",
        )
        return [Recipe.from_row(row) for row in (response.data or [])]

    def get_recipe(self, recipe_id: str) -> Recipe:
        response = _execute(
            self.client.table(RECIPES_TABLE).select("*").eq("id", recipe_id).limit(1),
            "get recipe",
        )
        if not response.data:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return Recipe.from_row(response.data[0])

    # ------------------------------------------------------------
    # Favoritos
    # ------------------------------------------------------------

    def _find_favorite_id(self, user_id: str, recipe_id: str) -> Optional[str]:
        response = _execute(
            self.client.table(FAVORITES_TABLE)
            .select("id")
            .eq("user_id", user_id)
            .eq("recipe_id", recipe_id)
            .limit(1),
            "find favorite",
        )
        if not response.data:
            return None
        return str(response.data[0]["id"])

    def is_favorite(self, user_id: str, recipe_id: str) -> bool:
        return self._find_favorite_id(user_id, recipe_id) is not None

    def toggle_favorite(self, user_id: str, recipe_id: str) -> bool:
        """
        Alterna el favorito de (user_id, recipe_id).

        Returns
        -------
        bool
            True si quedó marcado como favorito, False si se quitó.
        """
        favorite_id = self._find_favorite_id(user_id, recipe_id)
        if favorite_id is not None:
            _execute(
                self.client.table(FAVORITES_TABLE).delete().eq("id", favorite_id),
                "delete favorite",
            )
            logger.info(f"💔 Favorito quitado: user={user_id} recipe={recipe_id}")
            return False

        # Valida que la receta exista antes de crear el join
        self.get_recipe(recipe_id)
        _execute(
            self.client.table(FAVORITES_TABLE).insert(
                {"user_id": user_id, "recipe_id": recipe_id}
            ),
            "insert favorite",
        )
        logger.info(f"⭐ Favorito agregado: user={user_id} recipe={recipe_id}")
        return True

    def list_favorites(self, user_id: str) -> List[Favorite]:
        """
        Favoritos del usuario con la receta embebida, más nuevos primero.

        Se descartan los favoritos cuya receta ya no existe.
        """
        response = _execute(
            self.client.table(FAVORITES_TABLE)
            .select("*, recipe:recipes(*)")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
            "list favorites",
        )
        favorites = [Favorite.from_row(row) for row in (response.data or [])]
        return [fav for fav in favorites if fav.recipe is not None]

    def favorite_recipe_ids(self, user_id: str) -> Set[str]:
        response = _execute(
            self.client.table(FAVORITES_TABLE).select("recipe_id").eq("user_id", user_id),
            "list favorite ids",
        )
        return {str(row["recipe_id"]) for row in (response.data or [])}

    def remove_favorite(self, user_id: str, favorite_id: str) -> None:
        response = _execute(
            self.client.table(FAVORITES_TABLE)
            .delete()
            .eq("id", favorite_id)
            .eq("user_id", user_id),
            "remove favorite",
        )
        if not response.data:
            raise NotFoundError(f"Favorite {favorite_id} not found")

    # ------------------------------------------------------------
    # Consultas de ingredientes / perfil
    # ------------------------------------------------------------

    def log_ingredient_query(
        self,
        user_id: str,
        image_url: str,
        ingredient_names: Sequence[str],
    ) -> IngredientQuery:
        row: Dict[str, Any] = {
            "user_id": user_id,
            "image_url": image_url,
            "recognized_ingredients": list(ingredient_names),
        }
        response = _execute(
            self.client.table(QUERIES_TABLE).insert(row),
            "insert ingredient query",
        )
        if not response.data:
            raise RepositoryError("Database operation failed: insert ingredient query")
        return IngredientQuery.from_row(response.data[0])

    def recent_queries(self, user_id: str, limit: int = 5) -> List[IngredientQuery]:
        response = _execute(
            self.client.table(QUERIES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit),
            "list ingredient queries",
        )
        return [IngredientQuery.from_row(row) for row in (response.data or [])]

    def _count(self, table: str, user_id: str) -> int:
        response = _execute(
            self.client.table(table).select("id", count="exact").eq("user_id", user_id),
            f"count {table}",
        )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def profile_summary(self, user_id: str, recent_limit: int = 5) -> ProfileSummary:
        return ProfileSummary(
            query_count=self._count(QUERIES_TABLE, user_id),
            favorite_count=self._count(FAVORITES_TABLE, user_id),
            recent_queries=self.recent_queries(user_id, limit=recent_limit),
        )
