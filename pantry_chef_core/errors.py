"""
pantry_chef_core.errors
=======================

Taxonomía de errores del core.

Es deliberadamente gruesa:

- `MissingInputError`: falta un dato obligatorio del request (HTTP 400).
- `MissingConfigurationError`: falta una API key / credencial (HTTP 500).
- `UpstreamCallError`: falló una llamada externa (descarga de imagen,
  OpenAI, parseo de la respuesta del modelo). El cliente solo ve un mensaje
  genérico; la causa real queda encadenada (`__cause__`) y en el log.
- `RepositoryError`: falló una operación contra Supabase.
- `NotFoundError`: recurso inexistente (HTTP 404).
- `AuthenticationError`: token ausente, inválido o vencido (HTTP 401).

La traducción a status HTTP vive en `api/main.py`, nunca acá.
"""

from __future__ import annotations


class PantryChefError(Exception):
    """Base de todos los errores del core."""

    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingInputError(PantryChefError):
    default_message = "Missing required input"


class MissingConfigurationError(PantryChefError):
    default_message = "Service is not configured"


class UpstreamCallError(PantryChefError):
    default_message = "Upstream call failed"


class DetectionError(UpstreamCallError):
    default_message = "Failed to detect ingredients"


class GenerationError(UpstreamCallError):
    default_message = "Failed to generate recipes"


class RepositoryError(PantryChefError):
    default_message = "Database operation failed"


class NotFoundError(PantryChefError):
    default_message = "Not found"


class AuthenticationError(PantryChefError):
    default_message = "Invalid or expired token"
