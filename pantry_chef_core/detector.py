from __future__ import annotations

"""
pantry_chef_core.detector
=========================

Reconocimiento de ingredientes en una foto usando un modelo con visión.

Flujo de `IngredientDetector.detect(image_url)`:

1) Descarga la imagen (`media.fetch_image`) y normaliza su media type a
   jpeg/png/gif/webp.
2) La manda como data URL base64 junto con un prompt fijo que pide SOLO un
   array JSON de `{name, confidence}`.
3) Decodifica la respuesta con `parsing.decode_model_array`.
4) Descarta los ingredientes con `confidence <= CONFIDENCE_THRESHOLD`.

Cualquier falla (red, status HTTP, respuesta sin texto, JSON inválido,
error de OpenAI) se colapsa en `DetectionError`. La causa original queda
encadenada y logueada; el llamador no distingue tipos de error.
"""

import logging
from typing import Callable, Iterable, List

import requests
from openai import OpenAI

from .domain_models import DetectedIngredient
from .errors import DetectionError
from .llm_client import chat
from .media import fetch_image
from .parsing import ParseFailure, decode_model_array
from .prompts import INGREDIENT_DETECTION_PROMPT

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.3


def filter_confident(items: Iterable[DetectedIngredient]) -> List[DetectedIngredient]:
    """Conserva un ingrediente sii su confianza es estrictamente mayor a 0.3."""
    return [item for item in items if item.confidence > CONFIDENCE_THRESHOLD]


class IngredientDetector:
    """
    Adaptador request/response hacia el modelo multimodal.

    El cliente de OpenAI se recibe ya construido. Para descargar la imagen
    se abre una sesión HTTP por llamada (`session_factory`): el detector se
    usa desde varios threads del threadpool de FastAPI y `requests.Session`
    no garantiza ser thread-safe.
    """

    def __init__(
        self,
        client: OpenAI,
        *,
        model: str,
        session_factory: Callable[[], requests.Session] = requests.Session,
        max_tokens: int = 500,
        fetch_timeout_s: float = 30.0,
    ):
        self.client = client
        self.session_factory = session_factory
        self.model = model
        self.max_tokens = max_tokens
        self.fetch_timeout_s = fetch_timeout_s

    def detect(self, image_url: str) -> List[DetectedIngredient]:
        try:
            with self.session_factory() as http:
                image = fetch_image(image_url, http, timeout=self.fetch_timeout_s)
            logger.info(f"🖼️ Imagen descargada ({len(image.data)} bytes, {image.media_type}): {image_url}")

            text = chat(
                self.client,
                model=self.model,
                user_content=[
                    {"type": "image_url", "image_url": {"url": image.to_data_url()}},
                    {"type": "text", "text": INGREDIENT_DETECTION_PROMPT},
                ],
                max_tokens=self.max_tokens,
                temperature=0.0,
            )

            parsed = decode_model_array(text, DetectedIngredient)
            if isinstance(parsed, ParseFailure):
                raise ValueError(f"Invalid response format from model: {parsed.reason}")
        except Exception as e:
            logger.exception(f"Error detectando ingredientes en {image_url}: {e}")
            raise DetectionError() from e

        ingredients = filter_confident(parsed.value)
        discarded = len(parsed.value) - len(ingredients)
        logger.info(f"🥕 {len(ingredients)} ingredientes detectados ({discarded} descartados por baja confianza)")
        return ingredients
