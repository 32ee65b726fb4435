#!/usr/bin/env python3
"""
Prueba de conexión con OpenAI usando la key del .env.

Opcionalmente corre una detección real sobre una imagen:
    python tools/check_openai.py https://example.com/foto.jpg
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pantry_chef_core.config import get_settings  # noqa: E402
from pantry_chef_core.detector import IngredientDetector  # noqa: E402
from pantry_chef_core.errors import PantryChefError  # noqa: E402
from pantry_chef_core.llm_client import build_openai_client  # noqa: E402


def main() -> None:
    print("🔍 Cargando .env…")
    settings = get_settings()

    if not settings.has_model_key:
        raise RuntimeError("❌ OPENAI_API_KEY no encontrada en .env (o tiene el valor de ejemplo)")

    print("✅ API key encontrada (no la muestro por seguridad)")

    print("🔌 Probando conexión con OpenAI…")
    client = build_openai_client(settings)

    try:
        models = client.models.list()
        print("✅ Conexión exitosa!")
        print("📦 Modelos disponibles (primeros 5):")
        for m in models.data[:5]:
            print(" -", m.id)
    except Exception as e:
        print("❌ Error al conectarse a OpenAI:")
        print(e)
        sys.exit(1)

    if len(sys.argv) > 1:
        image_url = sys.argv[1]
        print(f"\n🖼️ Detectando ingredientes en {image_url} con {settings.openai_model_vision}…")
        detector = IngredientDetector(
            client,
            model=settings.openai_model_vision,
            max_tokens=settings.detection_max_tokens,
            fetch_timeout_s=settings.image_fetch_timeout_s,
        )
        try:
            for ingredient in detector.detect(image_url):
                print(f" - {ingredient.name} ({ingredient.confidence:.2f})")
        except PantryChefError as e:
            print(f"❌ {e.message} (causa: {e.__cause__})")
            sys.exit(1)


if __name__ == "__main__":
    main()
