"""
Subida de fotos al storage de Supabase.

Layout del bucket: `<prefix>/<epoch_ms>.<ext>` (ej:
`ingredient-photos/1718040000123.jpg`). El bucket es público: la URL que
devuelve `upload` es la que después se le pasa al detector.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from supabase import Client

from ..errors import RepositoryError
from ..media import guess_upload_extension

logger = logging.getLogger(__name__)


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class ImageStorage:
    def __init__(
        self,
        client: Client,
        *,
        bucket: str = "images",
        prefix: str = "ingredient-photos",
        clock: Callable[[], int] = _epoch_ms,
    ):
        self.client = client
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.clock = clock

    def bound_to(self, client: Client) -> "ImageStorage":
        """Mismo bucket y layout, usando otro cliente (ej: el del usuario)."""
        return ImageStorage(client, bucket=self.bucket, prefix=self.prefix, clock=self.clock)

    def object_path(self, filename: Optional[str], content_type: Optional[str] = None) -> str:
        ext = guess_upload_extension(filename, content_type)
        return f"{self.prefix}/{self.clock()}.{ext}"

    def public_url(self, path: str) -> str:
        return self.client.storage.from_(self.bucket).get_public_url(path)

    def upload_object(self, data: bytes, filename: Optional[str], content_type: Optional[str]) -> str:
        """
        Sube el archivo y devuelve el path del objeto dentro del bucket.

        Raises
        ------
        RepositoryError
            Si Supabase rechaza la subida (bucket inexistente, RLS, red).
        """
        path = self.object_path(filename, content_type)
        try:
            self.client.storage.from_(self.bucket).upload(
                path=path,
                file=data,
                file_options={"content-type": content_type or "image/jpeg"},
            )
        except Exception as e:
            logger.exception(f"Error subiendo imagen a {self.bucket}/{path}: {e}")
            raise RepositoryError("Failed to upload image") from e
        return path

    def upload(self, data: bytes, filename: Optional[str], content_type: Optional[str]) -> str:
        """Sube la imagen y devuelve su URL pública."""
        path = self.upload_object(data, filename, content_type)
        url = self.public_url(path)
        logger.info(f"📤 Imagen subida: {url}")
        return url

    def remove(self, paths: List[str]) -> None:
        try:
            self.client.storage.from_(self.bucket).remove(paths)
        except Exception as e:
            raise RepositoryError("Failed to remove objects") from e

    def list_buckets(self) -> List[str]:
        try:
            buckets = self.client.storage.list_buckets()
        except Exception as e:
            raise RepositoryError("Failed to list buckets") from e
        return [getattr(b, "name", None) or b["name"] for b in buckets]
