#!/usr/bin/env python3
"""
Diagnóstico de conectividad con Supabase (tablas + storage).

Verifica:
1. Que las credenciales del .env permitan consultar la tabla `recipes`.
2. Que exista el bucket de imágenes configurado.
3. Que se pueda subir un archivo, obtener su URL pública y borrarlo.

Ejecutar:
    python tools/check_storage.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pantry_chef_core.config import get_settings  # noqa: E402
from pantry_chef_core.db.repository import PantryRepository  # noqa: E402
from pantry_chef_core.db.storage import ImageStorage  # noqa: E402
from pantry_chef_core.db.supabase_client import build_supabase_client  # noqa: E402
from pantry_chef_core.errors import PantryChefError  # noqa: E402


def check_storage() -> bool:
    settings = get_settings()

    print("=" * 70)
    print("  DIAGNÓSTICO DE SUPABASE")
    print("=" * 70)
    print()
    print(f"Supabase URL: {'Found' if settings.supabase_url else 'Not found'}")
    print(f"Supabase Key: {'Found (hidden)' if settings.supabase_anon_key else 'Not found'}")

    try:
        client = build_supabase_client(settings)
    except PantryChefError as e:
        print(f"❌ {e.message}")
        print("   Obtén estos valores desde: Supabase Dashboard > Settings > API")
        return False

    # 1) Base de datos
    print("\n🗄️ Probando conexión a la base...")
    try:
        recipes = PantryRepository(client).list_recipes()
        print(f"✅ Conexión exitosa ({len(recipes)} recetas guardadas)")
    except PantryChefError as e:
        print(f"❌ {e.message}: {e.__cause__}")
        return False

    # 2) Buckets
    storage = ImageStorage(client, bucket=settings.storage_bucket, prefix="test-uploads")
    print("\n📦 Probando acceso a buckets...")
    try:
        buckets = storage.list_buckets()
        print(f"Buckets disponibles: {buckets}")
    except PantryChefError as e:
        print(f"⚠️  No se pudieron listar buckets: {e.__cause__}")
        print("   Puede ser normal con la anon key; se prueba el bucket directamente.")
        buckets = None

    if buckets is not None and settings.storage_bucket not in buckets:
        print(f"❌ Bucket '{settings.storage_bucket}' no encontrado.")
        print("   Crealo como público en Supabase Dashboard > Storage.")
        return False

    # 3) Subida + URL pública + limpieza
    print("\n📤 Probando subida...")
    try:
        path = storage.upload_object(b"Hello, this is a test file!", "test.txt", "text/plain")
        url = storage.public_url(path)
        print(f"✅ Subida exitosa. URL pública: {url}")
    except PantryChefError as e:
        print(f"❌ {e.message}: {e.__cause__}")
        print("   Revisá las políticas RLS del bucket en Supabase.")
        return False

    print("\n🧹 Limpiando archivo de prueba...")
    try:
        storage.remove([path])
        print("✅ Archivo de prueba eliminado")
    except PantryChefError as e:
        print(f"⚠️  No se pudo borrar {path}: {e.__cause__}")

    print("\n🎉 Storage listo para usar.")
    return True


if __name__ == "__main__":
    sys.exit(0 if check_storage() else 1)
