"""
Image input and export services

Turns uploaded files into in-memory image payloads and turns a generation
result back into a downloadable file.

Features:
- Read an upload as bytes tagged with its MIME type
- Drag-and-drop filtering (only image/* files)
- Export of the generated image under a fixed filename
"""

import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

from remix_ai.config import DOWNLOAD_FILENAME
from remix_ai.models import GenerationResult, ImageInput
from remix_ai.utils import split_data_url

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


async def read_upload(upload: UploadFile) -> ImageInput:
    data = await upload.read()
    return ImageInput(
        data=data,
        mime_type=upload.content_type or DEFAULT_MIME_TYPE,
        filename=upload.filename,
    )


def is_image_type(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")


async def read_dropped_upload(upload: UploadFile) -> Optional[ImageInput]:
    """
    Read a drag-and-drop upload. Files that are not image/* are ignored and
    None is returned; the file picker path (read_upload) accepts any file.
    """
    if not is_image_type(upload.content_type):
        logger.info(
            "Ignoring dropped file %s with type %s", upload.filename, upload.content_type
        )
        return None
    return await read_upload(upload)


def export_result(result: GenerationResult) -> tuple[str, bytes, str]:
    # The filename stays .png whatever the declared MIME type is.
    if not result.image_url:
        raise HTTPException(status_code=404, detail="No generated image to download")
    try:
        mime_type, payload = split_data_url(result.image_url)
    except ValueError as e:
        raise HTTPException(
            status_code=500, detail=f"Error decoding generated image: {e}"
        ) from e
    return DOWNLOAD_FILENAME, payload, mime_type
