"""File storage for case photos (local filesystem backend)."""

import logging
import os
import uuid
from uuid import UUID

from app.core.config import settings

logger = logging.getLogger(__name__)

# Content type -> stored file extension
IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
}


def _get_local_storage_path() -> str:
    """Get local storage directory path."""
    path = settings.LOCAL_STORAGE_PATH
    os.makedirs(path, exist_ok=True)
    return path


def build_case_photo_key(case_id: UUID, content_type: str) -> str:
    """Storage key for a new case photo: cases/{case_id}/{uuid}.{ext}."""
    ext = IMAGE_EXTENSIONS.get(content_type, "bin")
    return f"cases/{case_id}/{uuid.uuid4().hex}.{ext}"


def store_file(storage_key: str, data: bytes) -> str:
    """
    Store file content and return its public URL.

    Raises:
        OSError: The write failed
    """
    path = os.path.join(_get_local_storage_path(), storage_key)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return get_file_url(storage_key)


def get_file_url(storage_key: str) -> str:
    """Public URL for a stored file."""
    return f"{settings.MEDIA_URL_PREFIX.rstrip('/')}/{storage_key}"


def delete_file(storage_key: str) -> None:
    """Delete a stored file (used to clean up after a failed write)."""
    path = os.path.join(_get_local_storage_path(), storage_key)
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Failed to delete stored file %s", storage_key)
