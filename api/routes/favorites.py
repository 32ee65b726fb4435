"""
Endpoints de favoritos del usuario actual.

- GET    /api/favorites
- POST   /api/favorites/toggle   body: {recipeId}
- DELETE /api/favorites/{favorite_id}

Todas las operaciones usan el cliente de Supabase del usuario (su token).
"""

from fastapi import APIRouter, Depends

from pantry_chef_core.db.repository import PantryRepository
from pantry_chef_core.errors import MissingInputError

from ..dependencies import CurrentUser, get_current_user, get_user_repository
from ..models.requests import (
    FavoriteListResponse,
    FavoriteOut,
    ToggleFavoriteRequest,
    ToggleFavoriteResponse,
)

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("", response_model=FavoriteListResponse)
def list_favorites(
    user: CurrentUser = Depends(get_current_user),
    repository: PantryRepository = Depends(get_user_repository),
):
    favorites = repository.list_favorites(user.id)
    return FavoriteListResponse(favorites=[FavoriteOut.from_domain(f) for f in favorites])


@router.post("/toggle", response_model=ToggleFavoriteResponse, response_model_by_alias=True)
def toggle_favorite(
    body: ToggleFavoriteRequest,
    user: CurrentUser = Depends(get_current_user),
    repository: PantryRepository = Depends(get_user_repository),
):
    """
    Marca o desmarca una receta como favorita (por id, nunca por título).
    """
    if not body.recipe_id:
        raise MissingInputError("Recipe ID is required")

    favorited = repository.toggle_favorite(user.id, body.recipe_id)
    return ToggleFavoriteResponse(recipe_id=body.recipe_id, favorited=favorited)


@router.delete("/{favorite_id}")
def remove_favorite(
    favorite_id: str,
    user: CurrentUser = Depends(get_current_user),
    repository: PantryRepository = Depends(get_user_repository),
):
    repository.remove_favorite(user.id, favorite_id)
    return {"id": favorite_id, "status": "deleted"}
