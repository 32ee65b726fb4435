from __future__ import annotations

"""
pantry_chef_core.generator
==========================

Propuesta de recetas a partir de una lista de ingredientes.

`RecipeGenerator.generate(ingredients)` arma el par de prompts (system +
user), llama al modelo de texto y decodifica el primer array JSON de la
respuesta como `list[GeneratedRecipe]`.

No se verifica que vengan exactamente 3 recetas: se devuelve lo que el
modelo haya propuesto siempre que cumpla el esquema. Si una sola receta no
cumple, falla todo (no hay recuperación parcial).
"""

import logging
from typing import List, Sequence

from openai import OpenAI

from .domain_models import GeneratedRecipe
from .errors import GenerationError, MissingInputError
from .llm_client import chat
from .parsing import ParseFailure, decode_model_array
from .prompts import RECIPE_SYSTEM_PROMPT, build_recipe_user_prompt

logger = logging.getLogger(__name__)


class RecipeGenerator:
    """Adaptador request/response hacia el modelo de texto."""

    def __init__(self, client: OpenAI, *, model: str, max_tokens: int = 1500):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def generate(self, ingredients: Sequence[str]) -> List[GeneratedRecipe]:
        names = [str(i).strip() for i in ingredients if str(i).strip()]
        if not names:
            raise MissingInputError("Ingredients array is required")

        try:
            text = chat(
                self.client,
                model=self.model,
                system=RECIPE_SYSTEM_PROMPT,
                user_content=build_recipe_user_prompt(names),
                max_tokens=self.max_tokens,
                temperature=0.7,
            )

            parsed = decode_model_array(text, GeneratedRecipe)
            if isinstance(parsed, ParseFailure):
                raise ValueError(f"Invalid response format from model: {parsed.reason}")
        except Exception as e:
            logger.exception(f"Error generando recetas para {names}: {e}")
            raise GenerationError() from e

        logger.info(f"🍳 {len(parsed.value)} recetas generadas para: {', '.join(names)}")
        return parsed.value
