"""Domain enumerations for the LMS application.

Enums represent fixed sets of domain values (roles, auth providers,
notification status, layout document types).
"""

from enum import Enum


class UserRole(str, Enum):
    """Account role. Admin unlocks catalog management and reporting routes."""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]


class AuthProvider(str, Enum):
    """How an account was created: local e-mail registration or an OAuth provider."""

    LOCAL = "local"
    GOOGLE = "google"
    GITHUB = "github"


class NotificationStatus(str, Enum):
    """Admin notification read state."""

    READ = "read"
    UNREAD = "unread"


class LayoutType(str, Enum):
    """Site layout document types. One document per type."""

    BANNER = "banner"
    FAQ = "faq"
    CATEGORIES = "categories"
