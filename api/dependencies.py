"""
Dependencias de FastAPI.

Este módulo proporciona:
- `AppServices`: contenedor de los clientes/servicios construidos al
  arrancar la app (OpenAI, Supabase) y de los adaptadores que los usan
  (detector, generador, repositorio, storage).
- Dependencias reutilizables para obtener esos servicios en cada ruta.
- La identidad del usuario actual: el access token de Supabase se valida
  (firma y vencimiento) y las operaciones del usuario se hacen con un
  cliente de Supabase que lleva ese token, para que apliquen las políticas
  RLS del proyecto.

Los servicios se construyen UNA vez en el lifespan de `api/main.py` y se
guardan en `app.state.services`. En tests se reemplaza `get_services` con
`app.dependency_overrides`.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Optional

import logging

from fastapi import Depends, Header, HTTPException, Request

from pantry_chef_core.auth import TokenVerifier
from pantry_chef_core.config import Settings
from pantry_chef_core.db.repository import PantryRepository
from pantry_chef_core.db.storage import ImageStorage
from pantry_chef_core.db.supabase_client import build_supabase_client
from pantry_chef_core.detector import IngredientDetector
from pantry_chef_core.errors import MissingConfigurationError
from pantry_chef_core.generator import RecipeGenerator
from pantry_chef_core.llm_client import build_openai_client

logger = logging.getLogger(__name__)


@dataclass
class CurrentUser:
    """Usuario autenticado del request."""

    id: str
    access_token: str = field(repr=False)


@dataclass
class AppServices:
    """
    Servicios de la app. Cualquier campo puede ser None si falta su
    configuración; el error se lanza recién cuando una ruta lo necesita.

    `repository` y `storage` usan el cliente anónimo (recetas públicas).
    Para datos del usuario se usan `repository_for` / `storage_for`, que
    arman un cliente con el token del caller vía `user_client_factory`.
    """

    settings: Settings
    detector: Optional[IngredientDetector] = None
    generator: Optional[RecipeGenerator] = None
    repository: Optional[PantryRepository] = None
    storage: Optional[ImageStorage] = None
    token_verifier: Optional[TokenVerifier] = None
    user_client_factory: Optional[Callable[[str], Any]] = None
    _closeables: list = field(default_factory=list, repr=False)

    def repository_for(self, user: CurrentUser) -> PantryRepository:
        if self.repository is None or self.user_client_factory is None:
            raise MissingConfigurationError("Database is not configured")
        return PantryRepository(self.user_client_factory(user.access_token))

    def storage_for(self, user: CurrentUser) -> ImageStorage:
        if self.storage is None or self.user_client_factory is None:
            raise MissingConfigurationError("Storage is not configured")
        return self.storage.bound_to(self.user_client_factory(user.access_token))

    def close(self) -> None:
        for resource in self._closeables:
            try:
                resource.close()
            except Exception as e:
                logger.warning(f"Error cerrando {type(resource).__name__}: {e}")


def build_services(settings: Settings) -> AppServices:
    """
    Construye los clientes externos a partir de la configuración.

    Si falta la API key de OpenAI o las credenciales de Supabase, se loguea
    un warning y el servicio correspondiente queda en None.
    """
    services = AppServices(settings=settings)

    if settings.has_model_key:
        client = build_openai_client(settings)
        services.detector = IngredientDetector(
            client,
            model=settings.openai_model_vision,
            max_tokens=settings.detection_max_tokens,
            fetch_timeout_s=settings.image_fetch_timeout_s,
        )
        services.generator = RecipeGenerator(
            client,
            model=settings.openai_model_text,
            max_tokens=settings.generation_max_tokens,
        )
        services._closeables.append(client)
    else:
        logger.warning("OPENAI_API_KEY no configurada (o es un placeholder). Los endpoints de IA devolverán 500.")

    auth_client = None
    if settings.has_supabase:
        supabase = build_supabase_client(settings)
        services.repository = PantryRepository(supabase)
        services.storage = ImageStorage(
            supabase,
            bucket=settings.storage_bucket,
            prefix=settings.storage_prefix,
        )
        services.user_client_factory = partial(build_supabase_client, settings)
        auth_client = supabase.auth
    else:
        logger.warning("Supabase credentials not configured. Data endpoints will not work.")

    services.token_verifier = TokenVerifier(
        jwt_secret=settings.supabase_jwt_secret,
        auth_client=auth_client,
    )
    if settings.supabase_jwt_secret:
        logger.info("🔐 Tokens de usuario validados localmente (SUPABASE_JWT_SECRET)")
    elif auth_client is not None:
        logger.info("🔐 Tokens de usuario validados contra Supabase Auth")

    return services


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_repository(services: AppServices = Depends(get_services)) -> PantryRepository:
    if services.repository is None:
        raise MissingConfigurationError("Database is not configured")
    return services.repository


def require_detector(services: AppServices) -> IngredientDetector:
    """
    Detector listo para usar. Se llama DESPUÉS de validar el body, para que
    un request incompleto devuelva 400 aunque falte la key.
    """
    if not services.settings.has_model_key or services.detector is None:
        raise MissingConfigurationError("AI service is not configured")
    return services.detector


def require_generator(services: AppServices) -> RecipeGenerator:
    if not services.settings.has_model_key or services.generator is None:
        raise MissingConfigurationError("AI service is not configured")
    return services.generator


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        logger.warning("Authorization header no presente")
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format. Expected 'Bearer <token>'",
        )

    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(status_code=401, detail="Invalid token format")
    return token


def _authenticate(authorization: Optional[str], services: AppServices) -> CurrentUser:
    token = _bearer_token(authorization)
    if services.token_verifier is None:
        raise MissingConfigurationError("Authentication is not configured")
    # AuthenticationError -> 401 en el handler de api/main.py
    user_id = services.token_verifier.verify(token)
    return CurrentUser(id=user_id, access_token=token)


def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    services: AppServices = Depends(get_services),
) -> CurrentUser:
    """
    Usuario actual, desde el header `Authorization: Bearer <access_token>`.

    Raises:
        HTTPException 401: si falta el header o no tiene formato Bearer.
        AuthenticationError (401): firma inválida, token vencido o sin `sub`.
    """
    return _authenticate(authorization, services)


def get_optional_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    services: AppServices = Depends(get_services),
) -> Optional[CurrentUser]:
    """Como `get_current_user`, pero None si no hay header. Un token inválido sigue siendo 401."""
    if not authorization:
        return None
    return _authenticate(authorization, services)


def get_user_repository(
    user: CurrentUser = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> PantryRepository:
    return services.repository_for(user)


def get_user_storage(
    user: CurrentUser = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> ImageStorage:
    return services.storage_for(user)
