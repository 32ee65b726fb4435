from __future__ import annotations

"""
pantry_chef_core.engine
=======================

Orquestador de alto nivel de los dos flujos de la app.

- `analyze_photo`: subir foto → detectar ingredientes → registrar la consulta.
- `generate_and_save`: proponer recetas → guardarlas en un solo insert.

Este módulo no sabe nada de HTTP: la API (`api/routes/*`) y los scripts
de `tools/` lo llaman con los servicios ya construidos.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .db.repository import PantryRepository
from .db.storage import ImageStorage
from .detector import IngredientDetector
from .domain_models import DetectedIngredient, IngredientQuery, Recipe
from .generator import RecipeGenerator

logger = logging.getLogger(__name__)


@dataclass
class PhotoAnalysis:
    """Resultado de analizar una foto subida por el usuario."""

    image_url: str
    ingredients: List[DetectedIngredient]
    query: Optional[IngredientQuery] = None


def analyze_photo(
    *,
    user_id: str,
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str],
    storage: ImageStorage,
    detector: IngredientDetector,
    repository: PantryRepository,
) -> PhotoAnalysis:
    """
    Sube la foto, detecta ingredientes y registra la consulta.

    Solo se guardan los nombres de los ingredientes (no la confianza).
    Si la detección falla, la foto queda subida pero no se registra consulta.
    """
    image_url = storage.upload(data, filename, content_type)
    ingredients = detector.detect(image_url)
    query = repository.log_ingredient_query(
        user_id,
        image_url,
        [i.name for i in ingredients],
    )
    return PhotoAnalysis(image_url=image_url, ingredients=ingredients, query=query)


def generate_and_save(
    *,
    ingredients: Sequence[str],
    generator: RecipeGenerator,
    repository: PantryRepository,
) -> List[Recipe]:
    """
    Genera recetas y las persiste todas juntas (todo o nada).
    """
    generated = generator.generate(ingredients)
    saved = repository.save_generated_recipes(generated)
    logger.info(f"✅ Recetas generadas y guardadas: {[r.id for r in saved]}")
    return saved
