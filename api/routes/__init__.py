"""Rutas de la API."""

from . import favorites, ingredients, profile, recipes, uploads

__all__ = ["favorites", "ingredients", "profile", "recipes", "uploads"]
