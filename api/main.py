"""
API HTTP principal de pantry-chef.

Esta aplicación FastAPI expone endpoints REST que usan el core interno
(pantry_chef_core) para reconocer ingredientes en fotos, proponer recetas y
gestionar recetas guardadas y favoritos en Supabase.

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pantry_chef_core.config import get_settings
from pantry_chef_core.errors import (
    AuthenticationError,
    MissingConfigurationError,
    MissingInputError,
    NotFoundError,
    PantryChefError,
)

from .dependencies import build_services
from .routes import favorites, ingredients, profile, recipes, uploads

# Cargar variables de entorno
load_dotenv()

# Determinar ambiente
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurar logging según ambiente
log_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

_STATUS_BY_ERROR = {
    MissingInputError: 400,
    AuthenticationError: 401,
    NotFoundError: 404,
    MissingConfigurationError: 500,
}


def _status_for(error: PantryChefError) -> int:
    for error_type, status in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status
    return 500


async def pantry_chef_error_handler(request: Request, exc: PantryChefError):
    status = _status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} -> {status}: {exc.message}")
    return JSONResponse(status_code=status, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Body inválido en {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Construye los clientes externos al arrancar y los libera al apagar.
    Si un test ya dejó servicios en `app.state`, se respetan.
    """
    owns_services = getattr(app.state, "services", None) is None
    if owns_services:
        logger.info(f"🚀 Iniciando API en ambiente: {ENVIRONMENT}")
        app.state.services = build_services(get_settings())
    try:
        yield
    finally:
        if owns_services:
            app.state.services.close()
            app.state.services = None


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pantry Chef API",
        description="API para reconocer ingredientes en fotos y proponer recetas con IA",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS: configurar según ambiente
    cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
    cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]
    logger.info(f"🌐 CORS origins configurados: {cors_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PantryChefError, pantry_chef_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Registrar rutas
    app.include_router(ingredients.router)
    app.include_router(recipes.router)
    app.include_router(favorites.router)
    app.include_router(uploads.router)
    app.include_router(profile.router)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "pantry-chef-api"}

    @app.get("/health")
    async def health(request: Request):
        """Health check detallado: qué servicios externos están configurados."""
        services = getattr(request.app.state, "services", None)
        return {
            "status": "ok",
            "service": "pantry-chef-api",
            "version": VERSION,
            "environment": ENVIRONMENT,
            "ai_configured": bool(services and services.settings.has_model_key),
            "database_configured": bool(services and services.repository is not None),
        }

    return app


app = create_app()
