"""
Endpoints de recetas.

- POST /api/generate-recipes: propone recetas (no persiste)
- POST /api/recipes: propone recetas y las guarda (un solo insert)
- GET  /api/recipes: lista recetas guardadas, con búsqueda y categoría
- GET  /api/recipes/{recipe_id}: una receta

Los GET aceptan un usuario opcional: si viene el token, cada receta trae
`is_favorite` según los favoritos de ese usuario.
"""

import logging
from typing import Optional, Set

from fastapi import APIRouter, Depends, Query

from pantry_chef_core.db.repository import PantryRepository
from pantry_chef_core.engine import generate_and_save
from pantry_chef_core.errors import GenerationError, MissingInputError, PantryChefError
from pantry_chef_core.filters import ALL_CATEGORIES, filter_recipes

from ..dependencies import (
    AppServices,
    CurrentUser,
    get_optional_user,
    get_repository,
    get_services,
    require_generator,
)
from ..models.requests import (
    GenerateRecipesRequest,
    GenerateRecipesResponse,
    RecipeListResponse,
    RecipeOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["recipes"])


def _validated_ingredients(body: GenerateRecipesRequest):
    names = [i.strip() for i in (body.ingredients or []) if i and i.strip()]
    if not names:
        raise MissingInputError("Ingredients array is required")
    return names


@router.post("/generate-recipes", response_model=GenerateRecipesResponse)
def generate_recipes(
    body: GenerateRecipesRequest,
    services: AppServices = Depends(get_services),
):
    """
    Propone recetas para la lista de ingredientes.

    Returns:
        `{recipes: [GeneratedRecipe]}` (usualmente 3)

    Raises:
        400: `ingredients` ausente o vacío
        500: API key no configurada o falló la generación (mensaje genérico)
    """
    names = _validated_ingredients(body)

    generator = require_generator(services)
    try:
        recipes = generator.generate(names)
    except PantryChefError:
        raise
    except Exception as e:
        logger.exception(f"Error in generate-recipes API: {e}")
        raise GenerationError() from e

    return GenerateRecipesResponse(recipes=recipes)


@router.post("/recipes", response_model=RecipeListResponse)
def create_recipes(
    body: GenerateRecipesRequest,
    services: AppServices = Depends(get_services),
):
    """
    Genera recetas y las persiste todas juntas. Devuelve las filas con su id.
    """
    names = _validated_ingredients(body)
    generator = require_generator(services)
    repository = get_repository(services)

    saved = generate_and_save(ingredients=names, generator=generator, repository=repository)
    return RecipeListResponse(
        recipes=[RecipeOut.from_domain(r) for r in saved],
        count=len(saved),
    )


@router.get("/recipes", response_model=RecipeListResponse)
def list_recipes(
    search: Optional[str] = Query(default=None, description="Texto a buscar en título, descripción e ingredientes"),
    category: str = Query(default=ALL_CATEGORIES, description="Categoría exacta o 'all'"),
    user: Optional[CurrentUser] = Depends(get_optional_user),
    services: AppServices = Depends(get_services),
    repository: PantryRepository = Depends(get_repository),
):
    """Recetas guardadas, más nuevas primero."""
    recipes = filter_recipes(repository.list_recipes(), search=search, category=category)

    favorite_ids: Set[str] = set()
    if user is not None:
        favorite_ids = services.repository_for(user).favorite_recipe_ids(user.id)

    return RecipeListResponse(
        recipes=[RecipeOut.from_domain(r, is_favorite=r.id in favorite_ids) for r in recipes],
        count=len(recipes),
    )


@router.get("/recipes/{recipe_id}", response_model=RecipeOut)
def get_recipe(
    recipe_id: str,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    services: AppServices = Depends(get_services),
    repository: PantryRepository = Depends(get_repository),
):
    recipe = repository.get_recipe(recipe_id)
    favorited = user is not None and services.repository_for(user).is_favorite(user.id, recipe.id)
    return RecipeOut.from_domain(recipe, is_favorite=favorited)
