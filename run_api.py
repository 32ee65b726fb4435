#!/usr/bin/env python3
"""
Levanta la API de pantry-chef con uvicorn.

Uso:
    python run_api.py                      # 0.0.0.0:8000 con autoreload
    python run_api.py --port 9000 --no-reload

Los defaults salen de API_HOST, API_PORT y API_RELOAD ("1" / "0"), así el
mismo comando sirve en local y en el contenedor.
"""

import argparse
import os
import sys
from pathlib import Path

# api/ y pantry_chef_core/ se importan desde la raíz del repo
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

APP_IMPORT_PATH = "api.main:app"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Servidor HTTP de pantry-chef")
    parser.add_argument("--host", default=os.getenv("API_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("API_PORT", "8000")))
    parser.add_argument(
        "--reload",
        dest="reload",
        action=argparse.BooleanOptionalAction,
        default=os.getenv("API_RELOAD", "1") == "1",
        help="Reiniciar al detectar cambios (solo desarrollo)",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        import uvicorn
    except ImportError as e:
        print("❌ Falta uvicorn. Instalá las dependencias: pip install -e .")
        print(f"   Error: {e}")
        return 1

    print(f"🚀 pantry-chef escuchando en http://{args.host}:{args.port} (reload={args.reload})")
    print(f"📖 Swagger en http://localhost:{args.port}/docs")
    uvicorn.run(APP_IMPORT_PATH, host=args.host, port=args.port, reload=args.reload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
