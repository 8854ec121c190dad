"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from lms.domain.enums import AuthProvider, UserRole


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, create_user, etc.). No password hash."""

    id: str
    name: str
    email: str
    role: UserRole
    is_verified: bool
    provider: AuthProvider
    avatar: dict[str, Any] | None = None
    courses: tuple[str, ...] = ()
    has_password: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def owns_course(self, course_id: str) -> bool:
        """True if course_id is among the user's purchased courses."""
        return course_id in self.courses

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserResult":
        """Rebuild from the JSON form stored in the cache (see jsonable)."""
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            role=UserRole(data["role"]),
            is_verified=bool(data.get("is_verified", False)),
            provider=AuthProvider(data.get("provider", AuthProvider.LOCAL.value)),
            avatar=data.get("avatar"),
            courses=tuple(data.get("courses") or ()),
            has_password=bool(data.get("has_password", True)),
            created_at=_parse_dt(data.get("created_at")),
            updated_at=_parse_dt(data.get("updated_at")),
        )


@dataclass(frozen=True)
class UserSummary:
    """Author snapshot embedded in reviews, questions and replies."""

    user_id: str
    name: str
    avatar_url: str | None = None

    @classmethod
    def of(cls, user: UserResult) -> "UserSummary":
        return cls(
            user_id=user.id,
            name=user.name,
            avatar_url=(user.avatar or {}).get("url"),
        )

    def as_entry(self) -> dict[str, Any]:
        """Author fields embedded in a question, answer, review or reply."""
        return {
            "user_id": self.user_id,
            "user_name": self.name,
            "user_avatar": self.avatar_url,
        }


@dataclass(frozen=True)
class OAuthProfile:
    """Identity returned by an OAuth provider after code exchange."""

    provider: AuthProvider
    provider_user_id: str
    email: str
    name: str
    avatar_url: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
