"""
Modelos de request/response para la API.

Los campos obligatorios del body se declaran como Optional a propósito:
la ausencia se valida en la ruta para devolver 400 con el mensaje esperado
por la UI (`{"error": "..."}`) en lugar del 422 genérico de FastAPI.
"""

from dataclasses import asdict
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pantry_chef_core.domain_models import (
    DetectedIngredient,
    Favorite,
    GeneratedRecipe,
    IngredientQuery,
    Recipe,
)


class DetectIngredientsRequest(BaseModel):
    """Body de POST /api/detect-ingredients."""

    model_config = ConfigDict(populate_by_name=True)

    image_url: Optional[str] = Field(default=None, alias="imageUrl", description="URL pública de la foto")


class DetectIngredientsResponse(BaseModel):
    ingredients: List[DetectedIngredient]


class GenerateRecipesRequest(BaseModel):
    """Body de POST /api/generate-recipes y POST /api/recipes."""

    ingredients: Optional[List[str]] = Field(default=None, description="Nombres de ingredientes")


class GenerateRecipesResponse(BaseModel):
    recipes: List[GeneratedRecipe]


class RecipeOut(BaseModel):
    """Receta persistida (tabla `recipes`)."""

    id: str
    title: str
    description: str = ""
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    category: str = ""
    estimated_time: Optional[str] = None
    servings: Optional[int] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    is_favorite: bool = Field(default=False, description="Solo se informa si el request trae usuario")

    @classmethod
    def from_domain(cls, recipe: Recipe, is_favorite: bool = False) -> "RecipeOut":
        return cls(**asdict(recipe), is_favorite=is_favorite)


class RecipeListResponse(BaseModel):
    recipes: List[RecipeOut]
    count: int = 0


class ToggleFavoriteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_id: Optional[str] = Field(default=None, alias="recipeId")


class ToggleFavoriteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_id: str = Field(..., alias="recipeId")
    favorited: bool


class FavoriteOut(BaseModel):
    id: str
    recipe_id: str
    created_at: Optional[str] = None
    recipe: Optional[RecipeOut] = None

    @classmethod
    def from_domain(cls, favorite: Favorite) -> "FavoriteOut":
        return cls(
            id=favorite.id,
            recipe_id=favorite.recipe_id,
            created_at=favorite.created_at,
            recipe=RecipeOut.from_domain(favorite.recipe, is_favorite=True) if favorite.recipe else None,
        )


class FavoriteListResponse(BaseModel):
    favorites: List[FavoriteOut]


class IngredientQueryOut(BaseModel):
    id: str
    image_url: str
    recognized_ingredients: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None

    @classmethod
    def from_domain(cls, query: IngredientQuery) -> "IngredientQueryOut":
        return cls(
            id=query.id,
            image_url=query.image_url,
            recognized_ingredients=list(query.recognized_ingredients),
            created_at=query.created_at,
        )


class ProfileResponse(BaseModel):
    user_id: str
    query_count: int
    favorite_count: int
    recent_queries: List[IngredientQueryOut]


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")


class AnalyzePhotoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")
    ingredients: List[DetectedIngredient]
    query_id: Optional[str] = Field(default=None, alias="queryId")
