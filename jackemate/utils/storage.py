"""
Photo storage on local disk, served by the app under ``/static/uploads``.
"""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from jackemate.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


class StorageError(Exception):
    """Raised when a file cannot be stored."""


class LocalStorage:
    def __init__(self, base_dir: Path, url_prefix: str, max_bytes: int):
        self.base_dir = base_dir
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def _destination(self, path: str) -> Path:
        destination = (self.base_dir / path).resolve()
        if self.base_dir.resolve() not in destination.parents:
            raise StorageError(f"Invalid storage path: {path}")
        return destination

    def get_public_url(self, path: str) -> str:
        return f"{self.url_prefix}/{path.lstrip('/')}"

    def upload(self, path: str, file: BinaryIO, content_type: Optional[str] = None) -> str:
        """
        Copy ``file`` to ``path`` under the storage root.

        Returns:
            Public URL of the stored file

        Raises:
            StorageError: wrong type, too large, or the write failed
        """
        if content_type and not content_type.startswith("image/"):
            raise StorageError(f"Unsupported content type: {content_type}")
        if Path(path).suffix.lower() not in ALLOWED_IMAGE_EXTENSIONS:
            raise StorageError(f"Unsupported file extension: {path}")

        destination = self._destination(path)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            file.seek(0)
            with destination.open("wb") as buffer:
                shutil.copyfileobj(file, buffer)
            size = destination.stat().st_size
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc

        if size > self.max_bytes:
            destination.unlink(missing_ok=True)
            raise StorageError(f"File exceeds {self.max_bytes} bytes")

        logger.info("Stored upload %s (%s bytes)", path, size)
        return self.get_public_url(path)

    def delete(self, path: str) -> None:
        self._destination(path).unlink(missing_ok=True)


# Global storage instance (lazy initialization)
_storage_instance = None


def get_file_storage() -> LocalStorage:
    global _storage_instance

    if _storage_instance is None:
        _storage_instance = LocalStorage(
            Path(settings.UPLOAD_DIR),
            settings.UPLOAD_URL_PREFIX,
            settings.MAX_PHOTO_BYTES,
        )
        logger.info("Local photo storage initialized at %s", settings.UPLOAD_DIR)

    return _storage_instance
