"""
Endpoint para subir fotos de ingredientes al storage de Supabase.

- POST /api/uploads: multipart con el campo `image`
"""

from typing import Tuple

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from pantry_chef_core.db.storage import ImageStorage
from pantry_chef_core.errors import MissingInputError

from ..dependencies import get_user_storage
from ..models.requests import UploadResponse

router = APIRouter(prefix="/api/uploads", tags=["uploads"])

MAX_IMAGE_BYTES = 10 * 1024 * 1024


async def read_image_upload(image: UploadFile) -> Tuple[bytes, str]:
    """
    Lee y valida la imagen subida: debe ser `image/*` y pesar menos de 10MB.
    """
    content_type = (image.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise MissingInputError("Please select an image file")

    data = await image.read()
    if not data:
        raise MissingInputError("Image file is empty")
    if len(data) > MAX_IMAGE_BYTES:
        raise MissingInputError("Image size must be less than 10MB")
    return data, content_type


@router.post("", response_model=UploadResponse, response_model_by_alias=True)
async def upload_image(
    image: UploadFile = File(...),
    storage: ImageStorage = Depends(get_user_storage),
):
    """Sube la foto y devuelve su URL pública (`{imageUrl}`)."""
    data, content_type = await read_image_upload(image)
    url = await run_in_threadpool(storage.upload, data, image.filename, content_type)
    return UploadResponse(image_url=url)
