"""
Upload service — stores reservation photos and report screenshots on disk.

Saves to:  UPLOAD_DIR/<epoch-ms>-<original name>     (reservation photo)
           UPLOAD_DIR/reporte_<epoch-ms><ext>         (report screenshot)
The returned filename is what reservations and reports keep as a reference.
Files are written independently of the storage transaction.
"""

import os
import time
from typing import Optional

from fastapi import UploadFile

from app.config import settings
from app.domain.errors import StorageFailure
from app.utils.logger import get_logger

logger = get_logger(__name__)


def photo_filename(original: str) -> str:
    return f"{int(time.time() * 1000)}-{os.path.basename(original)}"


def screenshot_filename(original: str) -> str:
    return f"reporte_{int(time.time() * 1000)}{os.path.splitext(original)[1]}"


async def save_upload(upload: Optional[UploadFile], naming=photo_filename,
                      upload_dir: Optional[str] = None) -> Optional[str]:
    """
    Write an uploaded file into the upload folder.
    Returns the stored filename, or None when no file was sent.
    """
    if upload is None or not upload.filename:
        return None

    upload_dir = upload_dir or settings.UPLOAD_DIR
    filename = naming(upload.filename)
    filepath = os.path.join(upload_dir, filename)

    content = await upload.read()
    try:
        os.makedirs(upload_dir, exist_ok=True)
        with open(filepath, "wb") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"[UPLOAD] Failed to save {filename}: {e}", exc_info=True)
        raise StorageFailure(f"cannot write {filepath}: {e}") from e

    logger.info(f"[UPLOAD] Saved {filename} ({len(content)} bytes)")
    return filename
