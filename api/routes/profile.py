"""Endpoint de perfil: contadores y últimas consultas del usuario."""

from fastapi import APIRouter, Depends

from pantry_chef_core.db.repository import PantryRepository

from ..dependencies import CurrentUser, get_current_user, get_user_repository
from ..models.requests import IngredientQueryOut, ProfileResponse

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(
    user: CurrentUser = Depends(get_current_user),
    repository: PantryRepository = Depends(get_user_repository),
):
    summary = repository.profile_summary(user.id)
    return ProfileResponse(
        user_id=user.id,
        query_count=summary.query_count,
        favorite_count=summary.favorite_count,
        recent_queries=[IngredientQueryOut.from_domain(q) for q in summary.recent_queries],
    )
