"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from datetime import timedelta
from types import TracebackType
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from lms.application.dtos.media import ImageUpload, StoredImage
    from lms.application.dtos.user import OAuthProfile


# Cache service interface
class ICacheService(Protocol):
    """Cache protocol for read-through views and invalidation (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value (no expiry when ttl is None). Returns True on success."""

    async def delete(self, *keys: str) -> int:
        """Delete keys. Returns count deleted."""

    async def exists(self, key: str) -> bool:
        """Return True if key is present."""

    async def keys(self, pattern: str) -> list[str]:
        """Return keys matching a glob pattern."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern. Returns count deleted."""


# Unit of work interface
class IUnitOfWork(Protocol):
    """Transaction boundary: commit on clean exit, roll back on exception."""

    async def __aenter__(self) -> IUnitOfWork:
        """Begin the unit of work."""

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Commit or roll back."""


# Image storage interface
class IImageStorage(Protocol):
    """Protocol for image upload/destroy (local disk or S3)."""

    async def upload(self, image: ImageUpload, folder: str) -> StoredImage:
        """Store image under folder. Raises StorageUploadError on failure."""

    async def destroy(self, public_id: str) -> bool:
        """Remove image. Returns False if it did not exist; raises StorageDeleteError on failure."""


# Mail interface
class IMailer(Protocol):
    """Protocol for templated transactional mail."""

    async def send(
        self, to: str, subject: str, template: str, data: dict[str, Any]
    ) -> None:
        """Render template with data and send. Raises MailDeliveryException on failure."""


# Password hashing interface
class IPasswordHasher(Protocol):
    """Protocol for one-way password hashing."""

    async def hash(self, password: str) -> str:
        """Return a hash of password."""

    async def verify(self, password: str, hashed: str | None) -> bool:
        """Return True if password matches hashed (never for a missing hash)."""


# Token service interface
class ITokenService(Protocol):
    """Protocol for signed tokens (access, refresh, activation, oauth_state)."""

    def issue(
        self,
        subject: str,
        token_type: str,
        expires_delta: timedelta,
        claims: dict[str, Any] | None = None,
    ) -> str:
        """Return a signed token."""

    def decode(self, token: str, token_type: str) -> dict[str, Any]:
        """Return verified claims. Raises AuthenticationException if invalid, expired or wrong type."""


# OAuth provider interface
class IOAuthProvider(Protocol):
    """Protocol for one OAuth identity provider (Google, GitHub)."""

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        """Return the provider's consent URL."""

    async def fetch_profile(self, code: str, redirect_uri: str) -> OAuthProfile:
        """Exchange code for tokens and return the user's profile."""
