"""Image storage: local filesystem and S3-compatible backends.

Both implement lms.application.interfaces.services.IImageStorage
(upload -> StoredImage, destroy -> bool). StorageFactory picks one from
STORAGE_BACKEND.
"""

from lms.infrastructure.external.storage.factory import StorageFactory
from lms.infrastructure.external.storage.local_storage import (
    MEDIA_MOUNT_PATH,
    LocalStorageService,
)
from lms.infrastructure.external.storage.s3_storage import S3StorageService

__all__ = [
    "MEDIA_MOUNT_PATH",
    "LocalStorageService",
    "S3StorageService",
    "StorageFactory",
]
