"""Local filesystem image storage with path validation and atomic writes."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os

from lms.application.dtos.media import ImageUpload, StoredImage
from lms.infrastructure.exceptions import (
    StorageDeleteError,
    StoragePathError,
    StorageUploadError,
)
from lms.infrastructure.external.storage.naming import image_public_id

logger = logging.getLogger(__name__)

MEDIA_MOUNT_PATH = "/media"


class LocalStorageService:
    """Images under storage_root, served by the app at /media/<public_id>.

    Paths are validated against storage_root. Writes use temp file + rename.
    """

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all images.
            base_url: Public base URL (e.g. https://api.example.com); relative URLs when unset.
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else ""
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, public_id: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePathError on traversal."""
        full_path = (self.storage_root / public_id).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePathError(public_id) from e
        return full_path

    def url_for(self, public_id: str) -> str:
        return f"{self.base_url}{MEDIA_MOUNT_PATH}/{public_id}"

    async def upload(self, image: ImageUpload, folder: str) -> StoredImage:
        """Write image atomically and return its public id and URL."""
        public_id = image_public_id(folder, image.filename, image.content_type)
        target_path = self._get_full_path(public_id)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(image.content)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except OSError as e:
            raise StorageUploadError(public_id, str(e)) from e
        logger.info("Stored image %s (%s bytes)", public_id, len(image.content))
        return StoredImage(public_id=public_id, url=self.url_for(public_id))

    async def destroy(self, public_id: str) -> bool:
        """Delete image. Returns False if it did not exist."""
        file_path = self._get_full_path(public_id)
        try:
            if not file_path.exists():
                return False
            await aiofiles.os.remove(file_path)
        except OSError as e:
            raise StorageDeleteError(public_id, str(e)) from e
        logger.info("Deleted image %s", public_id)
        return True
