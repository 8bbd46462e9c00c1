"""Restaurant image upload helpers."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import FileSizeLimitException, InvalidFileTypeException

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}

_CHUNK_SIZE = 64 * 1024


def _extension_for(upload_file: UploadFile) -> str:
    suffix = Path(upload_file.filename or "").suffix.lower()
    if suffix in {".jpg", ".jpeg", ".png"}:
        return suffix
    return _EXTENSIONS.get(upload_file.content_type or "", "")


async def save_image_upload(
    upload_file: UploadFile, *, folder: Optional[Path] = None
) -> str:
    """Validate and persist an uploaded image, returning its public URL path.

    Only the content types in ``settings.allowed_image_types`` are accepted and
    the payload may not exceed ``settings.max_upload_bytes``. Files are stored
    under a fresh ``image-<uuid>`` name so client names never collide.
    """
    if upload_file.content_type not in settings.allowed_image_types:
        raise InvalidFileTypeException(settings.allowed_image_types)

    target_dir = folder or settings.uploads_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = f"image-{uuid.uuid4().hex}{_extension_for(upload_file)}"
    file_location = target_dir / filename

    written = 0
    try:
        async with aiofiles.open(file_location, "wb") as out_file:
            while True:
                chunk = await upload_file.read(_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > settings.max_upload_bytes:
                    raise FileSizeLimitException(settings.max_upload_bytes)
                await out_file.write(chunk)
    except BaseException:
        # Drop the partial file whatever interrupted the write.
        file_location.unlink(missing_ok=True)
        raise

    logger.debug("Stored upload at %s (%d bytes)", file_location, written)
    return f"/uploads/{filename}"


def delete_image(public_path: Optional[str], *, folder: Optional[Path] = None) -> None:
    """Remove a stored image given the URL path returned by `save_image_upload`."""
    if not public_path:
        return
    target = (folder or settings.uploads_dir) / Path(public_path).name
    try:
        target.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove stored image %s", target, exc_info=True)


__all__ = ["save_image_upload", "delete_image"]
