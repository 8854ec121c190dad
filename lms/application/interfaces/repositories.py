"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from lms.domain.enums import AuthProvider, LayoutType, UserRole

if TYPE_CHECKING:
    from lms.application.dtos.course import CourseCreate, CourseResult
    from lms.application.dtos.layout import LayoutResult
    from lms.application.dtos.notification import NotificationResult
    from lms.application.dtos.order import OrderResult
    from lms.application.dtos.user import UserResult


# User repository interface
class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""

    async def get_by_email(self, email: str) -> UserResult | None:
        """Return user by e-mail (case-insensitive)."""

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        """Return user if credentials are valid, else None (constant-time on unknown e-mail)."""

    async def verify_password(self, user_id: str, password: str) -> bool:
        """Return True if password matches the stored hash (False when the user has none)."""

    async def create_user(
        self,
        name: str,
        email: str,
        *,
        hashed_password: str | None = None,
        provider: AuthProvider = AuthProvider.LOCAL,
        avatar: dict[str, Any] | None = None,
        is_verified: bool = False,
        role: UserRole = UserRole.USER,
    ) -> UserResult:
        """Create user; raise DuplicateEmailException if the e-mail is taken."""

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> UserResult | None:
        """Set the given columns (name, avatar, role). Return None if missing."""

    async def set_password(self, user_id: str, new_password: str) -> UserResult | None:
        """Hash and store a new password. Return None if missing."""

    async def add_course(self, user_id: str, course_id: str) -> UserResult | None:
        """Append course_id to the user's purchased courses (no duplicates)."""

    async def list_all(self) -> list[UserResult]:
        """Return all users, newest first."""

    async def delete(self, user_id: str) -> bool:
        """Delete user. Returns True if a row was removed."""

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        """Count users created in [start, end]."""


# Course repository interface
class ICourseRepository(Protocol):
    """Protocol for course repository (DIP)."""

    async def get_by_id(self, course_id: str) -> CourseResult | None:
        """Return full course document by ID."""

    async def list_all(self) -> list[CourseResult]:
        """Return all courses, newest first."""

    async def create(
        self, data: CourseCreate, thumbnail: dict[str, Any] | None = None
    ) -> CourseResult:
        """Create course document."""

    async def update_fields(
        self, course_id: str, fields: dict[str, Any]
    ) -> CourseResult | None:
        """Replace the given top-level fields (JSON columns replaced whole). None if missing."""

    async def delete(self, course_id: str) -> bool:
        """Delete course. Returns True if a row was removed."""

    async def increment_purchased(self, course_id: str) -> None:
        """Increment the course purchase counter by one."""

    async def remove_user_content(self, user_id: str) -> int:
        """Pull the user's reviews, questions and replies from every course; recompute ratings.

        Returns number of courses changed.
        """

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        """Count courses created in [start, end]."""


# Order repository interface
class IOrderRepository(Protocol):
    """Protocol for order repository (DIP)."""

    async def create(
        self, user_id: str, course_id: str, payment_info: dict[str, Any]
    ) -> OrderResult:
        """Create order."""

    async def list_all(self) -> list[OrderResult]:
        """Return all orders, newest first."""

    async def delete_by_user(self, user_id: str) -> int:
        """Delete every order of the user. Returns rows removed."""

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        """Count orders created in [start, end]."""


# Notification repository interface
class INotificationRepository(Protocol):
    """Protocol for notification repository (DIP)."""

    async def create(self, user_id: str, title: str, message: str) -> NotificationResult:
        """Create unread notification."""

    async def get_by_id(self, notification_id: str) -> NotificationResult | None:
        """Return notification by ID."""

    async def list_all(self) -> list[NotificationResult]:
        """Return all notifications, newest first."""

    async def mark_read(self, notification_id: str) -> NotificationResult | None:
        """Set status to read. None if missing."""

    async def delete_by_user(self, user_id: str) -> int:
        """Delete every notification of the user. Returns rows removed."""

    async def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications created before cutoff. Returns rows removed."""


# Layout repository interface
class ILayoutRepository(Protocol):
    """Protocol for layout repository (DIP)."""

    async def get_by_type(self, layout_type: LayoutType) -> LayoutResult | None:
        """Return the layout document of the given type."""

    async def get_by_id(self, layout_id: str) -> LayoutResult | None:
        """Return layout by ID."""

    async def create(
        self,
        layout_type: LayoutType,
        *,
        faq: list[dict[str, Any]] | None = None,
        categories: list[dict[str, Any]] | None = None,
        banner: dict[str, Any] | None = None,
    ) -> LayoutResult:
        """Create layout document; raise LayoutAlreadyExistsException if the type exists."""

    async def update_fields(
        self, layout_id: str, fields: dict[str, Any]
    ) -> LayoutResult | None:
        """Replace faq/categories/banner. None if missing."""
