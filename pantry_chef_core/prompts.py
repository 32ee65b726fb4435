# pantry_chef_core/prompts.py

"""
Prompts e instrucciones para reconocer ingredientes y proponer recetas.

Los prompts están en inglés porque la UI y las recetas guardadas lo están.
"""

from typing import Sequence

from .domain_models import RECIPE_CATEGORIES

INGREDIENT_DETECTION_PROMPT = """
Analyze this image and identify all food ingredients visible.
Return a JSON array of objects with "name" and "confidence" (0-1) for each ingredient.
Only include actual food ingredients, not cookware or utensils.
Be specific (e.g., "red bell pepper" instead of just "pepper").

Example format:
[{"name": "tomato", "confidence": 0.95}, {"name": "red onion", "confidence": 0.87}]
""".strip()


RECIPE_SYSTEM_PROMPT = """
You are a helpful chef assistant. Generate creative and practical recipes using the provided ingredients.
Assume basic pantry staples are available: salt, pepper, oil, water, common spices.
Return exactly 3 different recipe suggestions as a JSON array.
""".strip()


RECIPE_OUTPUT_SCHEMA = """
[
  {
    "title": "Recipe Name",
    "description": "Brief description",
    "ingredients": ["ingredient with quantity", "..."],
    "steps": ["step 1", "step 2", "..."],
    "category": "%s",
    "estimatedTime": "30 minutes",
    "servings": 4
  }
]
""".strip() % "|".join(RECIPE_CATEGORIES)


def build_recipe_user_prompt(ingredients: Sequence[str]) -> str:
    return (
        f"Create recipes using these ingredients: {', '.join(ingredients)}\n\n"
        "Return a JSON array with this exact format:\n"
        f"{RECIPE_OUTPUT_SCHEMA}"
    )
