from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

import requests

DEFAULT_MEDIA_TYPE = "image/jpeg"
SUPPORTED_MEDIA_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

# Extensiones para nombrar los objetos en storage
_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


@dataclass
class FetchedImage:
    """Bytes de una imagen descargada + su media type ya normalizado."""
    data: bytes
    media_type: str

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.to_base64()}"


def classify_media_type(content_type: Optional[str]) -> str:
    """
    Mapea un Content-Type arbitrario a uno de los formatos que acepta el
    modelo de visión. Cualquier cosa no reconocida (o ausente) cae en jpeg.
    """
    ct = (content_type or "").lower()
    if "png" in ct:
        return "image/png"
    if "gif" in ct:
        return "image/gif"
    if "webp" in ct:
        return "image/webp"
    return DEFAULT_MEDIA_TYPE


def fetch_image(url: str, http: requests.Session, timeout: float = 30.0) -> FetchedImage:
    """
    Descarga la imagen en `url`.

    Raises
    ------
    requests.HTTPError
        Si la respuesta no es 2xx.
    requests.RequestException
        Ante cualquier problema de red.
    """
    response = http.get(url, timeout=timeout)
    response.raise_for_status()
    return FetchedImage(
        data=response.content,
        media_type=classify_media_type(response.headers.get("content-type")),
    )


def guess_upload_extension(filename: Optional[str], content_type: Optional[str] = None) -> str:
    """
    Extensión para el objeto en storage: la del archivo subido si tiene,
    si no la del content type.
    """
    if filename:
        suffix = PurePosixPath(filename).suffix.lstrip(".").lower()
        if suffix:
            return suffix
    if content_type:
        ext = _EXTENSIONS.get(content_type.lower())
        if ext:
            return ext
        guessed = mimetypes.guess_extension(content_type)
        if guessed:
            return guessed.lstrip(".")
    return _EXTENSIONS[DEFAULT_MEDIA_TYPE]
