# pantry_chef_core/config.py
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

"""
pantry_chef_core.config
=======================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)
- La detección de API keys "de ejemplo" (`is_placeholder_key`)

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- Los defaults están pensados para desarrollo local.
- Si una variable crítica (API key de OpenAI, credenciales de Supabase)
  no está presente, NO se falla acá: el error se lanza donde se usa.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


# Valores que vienen en .env.example y nunca son una key real
PLACEHOLDER_KEYS = frozenset(
    {
        "your_openai_api_key_here",
        "your-openai-api-key",
        "your-api-key",
        "sk-...",
        "changeme",
    }
)


def is_placeholder_key(value: str | None) -> bool:
    """True si la key está vacía o es un valor de ejemplo sin reemplazar."""
    if not value or not value.strip():
        return True
    return value.strip().lower() in PLACEHOLDER_KEYS


@dataclass
class Settings:
    """
    Contenedor tipado de configuración global de la aplicación.

    Attributes
    ----------
    openai_api_key:
        API key de OpenAI. Requerida (y no placeholder) para detectar
        ingredientes y generar recetas.
    openai_model_vision:
        Modelo multimodal usado para reconocer ingredientes en una foto.
    openai_model_text:
        Modelo de texto usado para proponer recetas.
    supabase_url / supabase_anon_key:
        Proyecto de Supabase (tablas + storage). Requeridos para todo
        acceso a datos.
    supabase_jwt_secret:
        JWT secret del proyecto (opcional). Si está, los tokens de usuario
        se validan localmente con PyJWT; si no, se validan contra Supabase
        Auth en cada request.
    storage_bucket / storage_prefix:
        Bucket público y carpeta donde se guardan las fotos subidas.
    """

    # OpenAI
    openai_api_key: str
    openai_model_vision: str
    openai_model_text: str

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_jwt_secret: str = ""
    storage_bucket: str = "images"
    storage_prefix: str = "ingredient-photos"

    # Límites de las llamadas
    image_fetch_timeout_s: float = 30.0
    detection_max_tokens: int = 500
    generation_max_tokens: int = 1500

    @property
    def has_model_key(self) -> bool:
        return not is_placeholder_key(self.openai_api_key)

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - OPENAI_API_KEY
    - OPENAI_MODEL_VISION (default: "gpt-4o-mini")
    - OPENAI_MODEL_TEXT (default: "gpt-4.1-mini")
    - SUPABASE_URL
    - SUPABASE_ANON_KEY
    - SUPABASE_JWT_SECRET (opcional)
    - SUPABASE_STORAGE_BUCKET (default: "images")
    - SUPABASE_STORAGE_PREFIX (default: "ingredient-photos")
    - IMAGE_FETCH_TIMEOUT_S (default: 30)
    """
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_model_vision=os.getenv("OPENAI_MODEL_VISION", "gpt-4o-mini"),
        openai_model_text=os.getenv("OPENAI_MODEL_TEXT", "gpt-4.1-mini"),
        supabase_url=os.getenv("SUPABASE_URL", ""),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
        supabase_jwt_secret=os.getenv("SUPABASE_JWT_SECRET", ""),
        storage_bucket=os.getenv("SUPABASE_STORAGE_BUCKET", "images"),
        storage_prefix=os.getenv("SUPABASE_STORAGE_PREFIX", "ingredient-photos"),
        image_fetch_timeout_s=float(os.getenv("IMAGE_FETCH_TIMEOUT_S", "30")),
    )
