"""User repository with password helpers. Interface methods return application DTOs."""

from __future__ import annotations

import asyncio
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.dtos.user import UserResult
from lms.domain.enums import AuthProvider, UserRole
from lms.domain.exceptions import DuplicateEmailException
from lms.infrastructure.persistence.models.user import User
from lms.infrastructure.persistence.repositories.base import BaseRepository
from lms.infrastructure.security.password import check_password, hash_password

_UPDATABLE = frozenset({"name", "avatar", "role"})

# Compared against when the e-mail is unknown so both paths cost one bcrypt check.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(hash_password, "not-a-real-password")
    return _dummy_hash_cache


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password hash)."""
    return UserResult(
        id=u.id,
        name=u.name,
        email=u.email,
        role=UserRole(u.role),
        is_verified=u.is_verified,
        provider=AuthProvider(u.provider),
        avatar=dict(u.avatar) if u.avatar else None,
        courses=tuple(u.courses or ()),
        has_password=u.hashed_password is not None,
        created_at=u.created_at,
        updated_at=u.updated_at,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Authenticate, create_user, set_password, add_course, list/delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def _get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self._get(user_id)
        return _user_to_result(user) if user else None

    async def get_by_email(self, email: str) -> UserResult | None:
        user = await self._get_by_email(email)
        return _user_to_result(user) if user else None

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        user = await self._get_by_email(email)
        if not user or user.hashed_password is None:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(check_password, password, dummy_hash)
            return None
        if not await asyncio.to_thread(check_password, password, user.hashed_password):
            return None
        return _user_to_result(user)

    async def verify_password(self, user_id: str, password: str) -> bool:
        user = await self._get(user_id)
        if user is None:
            return False
        return await asyncio.to_thread(check_password, password, user.hashed_password)

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
        """Create user; raise DuplicateEmailException on unique constraint violation."""
        user = User(
            name=name,
            email=email.strip().lower(),
            hashed_password=hashed_password,
            provider=provider.value,
            avatar=avatar,
            is_verified=is_verified,
            role=role.value,
            courses=[],
        )
        try:
            created = await self._add(user)
        except IntegrityError as e:
            raise DuplicateEmailException(email) from e
        return _user_to_result(created)

    async def update_fields(
        self, user_id: str, fields: dict[str, Any]
    ) -> UserResult | None:
        user = await self._get(user_id)
        if user is None:
            return None
        values = dict(fields)
        if isinstance(values.get("role"), UserRole):
            values["role"] = values["role"].value
        updated = await self._assign(user, values, _UPDATABLE)
        return _user_to_result(updated)

    async def set_password(self, user_id: str, new_password: str) -> UserResult | None:
        user = await self._get(user_id)
        if user is None:
            return None
        user.hashed_password = await asyncio.to_thread(hash_password, new_password)
        await self.db.flush()
        await self.db.refresh(user)
        return _user_to_result(user)

    async def add_course(self, user_id: str, course_id: str) -> UserResult | None:
        user = await self._get(user_id)
        if user is None:
            return None
        courses = list(user.courses or [])
        if course_id not in courses:
            courses.append(course_id)
            user = await self._assign(user, {"courses": courses}, frozenset({"courses"}))
        return _user_to_result(user)

    async def list_all(self) -> list[UserResult]:
        return [_user_to_result(u) for u in await self._list_newest_first()]

    async def delete(self, user_id: str) -> bool:
        return await self._remove(user_id)
