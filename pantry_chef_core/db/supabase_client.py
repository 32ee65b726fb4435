# pantry_chef_core/db/supabase_client.py
from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, create_client
from supabase.client import ClientOptions

from ..config import Settings
from ..errors import MissingConfigurationError

"""
pantry_chef_core.db.supabase_client
===================================

Construcción del cliente de Supabase (tablas + storage).

No hay singleton a nivel de módulo: el cliente lo crea el entry point
(lifespan de la API o el script de tools) y se pasa explícitamente al
repositorio y al storage. En tests se reemplaza por un fake.

Hay dos tipos de cliente:
- anónimo (solo la anon key): recetas públicas y validación de tokens.
- de usuario (`access_token`): lleva `Authorization: Bearer <token>` en
  cada llamada a PostgREST y Storage, así las políticas RLS de Supabase
  se evalúan con la identidad del caller.

Variables de entorno
--------------------
- SUPABASE_URL:
    URL del proyecto, ej: https://xyzcompany.supabase.co
- SUPABASE_ANON_KEY:
    Key pública (anon). Las políticas RLS las define Supabase, no esta app.
"""

logger = logging.getLogger(__name__)


def build_supabase_client(settings: Settings, access_token: Optional[str] = None) -> Client:
    """
    Crea el cliente de Supabase con la URL y la anon key configuradas.

    Si se pasa `access_token`, el cliente actúa como ese usuario.

    Raises
    ------
    MissingConfigurationError
        Si falta SUPABASE_URL o SUPABASE_ANON_KEY.
    """
    if not settings.has_supabase:
        raise MissingConfigurationError(
            "SUPABASE_URL / SUPABASE_ANON_KEY no están configuradas en el .env"
        )

    if access_token is None:
        logger.info(f"🔌 Conectando a Supabase: {settings.supabase_url}")
        return create_client(settings.supabase_url, settings.supabase_anon_key)

    options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
    return create_client(settings.supabase_url, settings.supabase_anon_key, options=options)
