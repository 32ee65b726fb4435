"""
Endpoints de reconocimiento de ingredientes.

- POST /api/detect-ingredients: detecta ingredientes en una imagen ya subida
- POST /api/analyze: sube la foto, detecta y registra la consulta del usuario
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from pantry_chef_core.engine import analyze_photo
from pantry_chef_core.errors import DetectionError, MissingInputError, PantryChefError

from ..dependencies import (
    AppServices,
    CurrentUser,
    get_current_user,
    get_services,
    require_detector,
)
from ..models.requests import (
    AnalyzePhotoResponse,
    DetectIngredientsRequest,
    DetectIngredientsResponse,
)
from .uploads import read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ingredients"])


@router.post("/detect-ingredients", response_model=DetectIngredientsResponse)
def detect_ingredients(
    body: DetectIngredientsRequest,
    services: AppServices = Depends(get_services),
):
    """
    Detecta los ingredientes visibles en la imagen de `imageUrl`.

    Returns:
        `{ingredients: [{name, confidence}]}` solo con confianza > 0.3

    Raises:
        400: falta `imageUrl`
        500: API key no configurada o falló la detección (mensaje genérico)
    """
    if not body.image_url or not body.image_url.strip():
        raise MissingInputError("Image URL is required")

    detector = require_detector(services)
    try:
        ingredients = detector.detect(body.image_url.strip())
    except PantryChefError:
        raise
    except Exception as e:
        logger.exception(f"Error in detect-ingredients API: {e}")
        raise DetectionError() from e

    return DetectIngredientsResponse(ingredients=ingredients)


@router.post("/analyze", response_model=AnalyzePhotoResponse, response_model_by_alias=True)
async def analyze(
    image: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """
    Flujo completo de la página de upload: sube la foto al bucket, detecta
    ingredientes y guarda la consulta en `ingredient_queries`.
    """
    data, content_type = await read_image_upload(image)

    detector = require_detector(services)
    storage = services.storage_for(user)
    repository = services.repository_for(user)

    result = await run_in_threadpool(
        analyze_photo,
        user_id=user.id,
        data=data,
        filename=image.filename,
        content_type=content_type,
        storage=storage,
        detector=detector,
        repository=repository,
    )
    return AnalyzePhotoResponse(
        image_url=result.image_url,
        ingredients=result.ingredients,
        query_id=result.query.id if result.query else None,
    )
