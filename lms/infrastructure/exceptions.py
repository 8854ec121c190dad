"""Infrastructure exceptions for storage and database configuration.

Storage errors extend LmsException so the API layer can map them
to HTTP responses consistently.
"""

from lms.domain.exceptions import LmsException


class StorageException(LmsException):
    """Base exception for image storage operations."""


class StorageUploadError(StorageException):
    """Image upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload image: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Image deletion failed."""

    def __init__(self, public_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete image: {public_id}",
            "STORAGE_DELETE_ERROR",
            {"public_id": public_id, "reason": reason},
        )


class StoragePathError(StorageException):
    """Public id resolves outside the storage root."""

    def __init__(self, public_id: str) -> None:
        super().__init__(
            f"Invalid storage path: {public_id}",
            "STORAGE_PATH_ERROR",
            {"public_id": public_id},
        )


class DatabaseNotConfiguredException(LmsException):
    """Raised when the SQL engine cannot be created (DATABASE_URL missing or unsupported)."""

    def __init__(self) -> None:
        super().__init__(
            "Database not configured. Set DATABASE_URL "
            "(postgresql+asyncpg://...) and run: alembic upgrade head",
            "DATABASE_NOT_CONFIGURED",
        )


class OAuthProviderError(LmsException):
    """Identity provider rejected the code exchange or profile request."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(
            f"{provider} sign-in failed: {reason}",
            "OAUTH_PROVIDER_ERROR",
            {"provider": provider},
        )
