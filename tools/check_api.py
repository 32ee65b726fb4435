#!/usr/bin/env python3
"""
Script de verificación para diagnosticar problemas con la API.

Revisa dependencias instaladas, imports del core y de la API, configuración
del .env y que la app FastAPI se pueda crear.

Ejecutar: python tools/check_api.py
"""

import importlib
import sys
from pathlib import Path

# Agregar raíz del proyecto al path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

print("🔍 Verificando dependencias y estructura de la API...\n")

# 1) Verificar dependencias (nombre de import -> nombre en PyPI)
print("1. Verificando dependencias:")
DEPENDENCIES = {
    "fastapi": "fastapi",
    "pydantic": "pydantic",
    "uvicorn": "uvicorn",
    "openai": "openai",
    "supabase": "supabase",
    "requests": "requests",
    "jwt": "PyJWT",
    "dotenv": "python-dotenv",
    "multipart": "python-multipart",
}
for module_name, dist_name in DEPENDENCIES.items():
    try:
        module = importlib.import_module(module_name)
        version = getattr(module, "__version__", "?")
        print(f"   ✅ {dist_name} {version}")
    except ImportError as e:
        print(f"   ❌ {dist_name} no instalado: {e}")
        print(f"      Ejecuta: pip install {dist_name}")
        sys.exit(1)

# 2) Verificar imports del core
print("\n2. Verificando imports del core:")
for module_name in (
    "pantry_chef_core.config",
    "pantry_chef_core.auth",
    "pantry_chef_core.detector",
    "pantry_chef_core.generator",
    "pantry_chef_core.db.repository",
    "pantry_chef_core.engine",
):
    try:
        importlib.import_module(module_name)
        print(f"   ✅ {module_name}")
    except ImportError as e:
        print(f"   ❌ Error importando {module_name}: {e}")
        sys.exit(1)

# 3) Verificar configuración
print("\n3. Verificando configuración (.env):")
from pantry_chef_core.config import get_settings  # noqa: E402

settings = get_settings()
if settings.has_model_key:
    print("   ✅ OPENAI_API_KEY configurada (no la muestro por seguridad)")
else:
    print("   ⚠️  OPENAI_API_KEY ausente o con valor de ejemplo: los endpoints de IA devolverán 500")
if settings.has_supabase:
    print(f"   ✅ Supabase: {settings.supabase_url}")
else:
    print("   ⚠️  SUPABASE_URL / SUPABASE_ANON_KEY no configuradas: los endpoints de datos no funcionarán")
if settings.supabase_jwt_secret:
    print("   ✅ SUPABASE_JWT_SECRET: tokens validados localmente")
elif settings.has_supabase:
    print("   ℹ️  Sin SUPABASE_JWT_SECRET: cada token se valida contra Supabase Auth")
else:
    print("   ⚠️  Sin SUPABASE_JWT_SECRET ni Supabase: las rutas de usuario devolverán 500")

# 4) Verificar que se puede crear la app
print("\n4. Verificando creación de la app FastAPI:")
try:
    from api.main import app
    print("   ✅ App FastAPI creada correctamente")
    print(f"   ✅ Título: {app.title}")
    print(f"   ✅ Versión: {app.version}")
    for route in app.routes:
        methods = ",".join(sorted(getattr(route, "methods", []) or []))
        print(f"      {methods:<10} {route.path}")
except Exception as e:
    print(f"   ❌ Error creando app: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)

print("\n✅ Todas las verificaciones pasaron. La API debería funcionar correctamente.")
print("\nPara levantar el servidor:")
print("   uvicorn api.main:app --reload --port 8000")
