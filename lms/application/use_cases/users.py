"""User account use cases: registration, sessions, profile and admin management.

Every mutation commits through the unit of work first and only then applies
the cache invalidation rule for its Mutation; profile mutations write the
fresh profile through to ``user:<id>``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lms.application.dtos.auth import (
    ActivationTicket,
    AuthTokens,
    PendingRegistration,
    TokenLifetimes,
)
from lms.application.dtos.user import UserResult
from lms.application.services.cache_keys import admin_users_key, user_key
from lms.application.services.cache_policy import (
    CacheInvalidator,
    Mutation,
    read_through,
)
from lms.application.services.field_filter import USER_UPDATE_SHAPE, filter_or_raise
from lms.core.constants import (
    ACTIVATION_CODE_LENGTH,
    FOLDER_AVATAR,
    TOKEN_ACCESS,
    TOKEN_ACTIVATION,
    TOKEN_REFRESH,
    USER_CACHE_TTL_SECONDS,
)
from lms.domain.enums import UserRole
from lms.domain.exceptions import (
    AuthenticationException,
    DuplicateEmailException,
    ResourceNotFoundException,
    ValidationException,
)
from lms.shared.telemetry.logging import get_logger
from lms.shared.telemetry.tracing import traced
from lms.shared.utils.generators import generate_numeric_code

if TYPE_CHECKING:
    from lms.application.dtos.media import ImageUpload
    from lms.application.interfaces.repositories import (
        ICourseRepository,
        INotificationRepository,
        IOrderRepository,
        IUserRepository,
    )
    from lms.application.interfaces.services import (
        ICacheService,
        IImageStorage,
        IMailer,
        IPasswordHasher,
        ITokenService,
        IUnitOfWork,
    )

logger = get_logger(__name__)


def issue_session_tokens(
    tokens: ITokenService, lifetimes: TokenLifetimes, user: UserResult
) -> AuthTokens:
    """Issue an access/refresh pair for user."""
    claims = {"role": user.role.value}
    return AuthTokens(
        access_token=tokens.issue(user.id, TOKEN_ACCESS, lifetimes.access, claims),
        refresh_token=tokens.issue(user.id, TOKEN_REFRESH, lifetimes.refresh, claims),
        user=user,
    )


class UserService:
    """Account lifecycle for students and admins."""

    def __init__(
        self,
        user_repo: IUserRepository,
        course_repo: ICourseRepository,
        order_repo: IOrderRepository,
        notification_repo: INotificationRepository,
        uow: IUnitOfWork,
        cache: ICacheService | None,
        tokens: ITokenService,
        hasher: IPasswordHasher,
        mailer: IMailer,
        storage: IImageStorage,
        lifetimes: TokenLifetimes,
    ) -> None:
        self.user_repo = user_repo
        self.course_repo = course_repo
        self.order_repo = order_repo
        self.notification_repo = notification_repo
        self.uow = uow
        self.cache = cache
        self.invalidator = CacheInvalidator(cache)
        self.tokens = tokens
        self.hasher = hasher
        self.mailer = mailer
        self.storage = storage
        self.lifetimes = lifetimes

    async def _require_user(self, user_id: str) -> UserResult:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    # ---- Registration ----

    async def register(self, name: str, email: str, password: str) -> ActivationTicket:
        """Mail a 4-digit activation code and return the signed activation token.

        Nothing is stored until activate() succeeds.
        """
        email = email.strip().lower()
        if await self.user_repo.get_by_email(email) is not None:
            raise DuplicateEmailException(email)
        code = generate_numeric_code(ACTIVATION_CODE_LENGTH)
        claims = {
            "name": name,
            "hashed_password": await self.hasher.hash(password),
            "code_hash": await self.hasher.hash(code),
        }
        token = self.tokens.issue(
            email, TOKEN_ACTIVATION, self.lifetimes.activation, claims
        )
        await self.mailer.send(
            email,
            "Activate your account",
            "activation",
            {
                "name": name,
                "activation_code": code,
                "expires_minutes": int(self.lifetimes.activation.total_seconds() // 60),
            },
        )
        logger.info("Activation code sent to %s", email)
        return ActivationTicket(activation_token=token, email=email)

    async def activate(self, activation_token: str, activation_code: str) -> UserResult:
        """Create the verified account carried by the activation token."""
        claims = self.tokens.decode(activation_token, TOKEN_ACTIVATION)
        pending = PendingRegistration(
            name=claims["name"],
            email=claims["sub"],
            hashed_password=claims["hashed_password"],
            code_hash=claims["code_hash"],
        )
        if not await self.hasher.verify(activation_code, pending.code_hash):
            raise ValidationException("Invalid activation code", "activation_code")
        async with self.uow:
            if await self.user_repo.get_by_email(pending.email) is not None:
                raise DuplicateEmailException(pending.email)
            user = await self.user_repo.create_user(
                pending.name,
                pending.email,
                hashed_password=pending.hashed_password,
                is_verified=True,
            )
        await self.invalidator.invalidate(Mutation.USER_ACTIVATED, user.id)
        logger.info("User %s activated", user.id)
        return user

    # ---- Sessions ----

    async def login(self, email: str, password: str) -> AuthTokens:
        user = await self.user_repo.authenticate(email, password)
        if user is None:
            raise AuthenticationException("Invalid email or password")
        session = issue_session_tokens(self.tokens, self.lifetimes, user)
        await self.invalidator.write_through(Mutation.USER_LOGGED_IN, user.id, user)
        return session

    async def logout(self, user_id: str) -> None:
        await self.invalidator.invalidate(Mutation.USER_LOGGED_OUT, user_id)

    async def refresh(self, refresh_token: str) -> AuthTokens:
        """Exchange a refresh token for a new token pair."""
        claims = self.tokens.decode(refresh_token, TOKEN_REFRESH)
        user = await self.user_repo.get_by_id(claims["sub"])
        if user is None:
            raise AuthenticationException("User no longer exists")
        return issue_session_tokens(self.tokens, self.lifetimes, user)

    # ---- Profile ----

    async def get_info(self, user_id: str) -> dict[str, Any]:
        """Profile from ``user:<id>`` (7 days) or the record store."""
        return await read_through(
            self.cache,
            user_key(user_id),
            lambda: self._require_user(user_id),
            ttl=USER_CACHE_TTL_SECONDS,
        )

    async def get_profile(self, user_id: str) -> UserResult:
        """Same lookup as get_info, as a UserResult (used for request authentication)."""
        return UserResult.from_dict(await self.get_info(user_id))

    async def update_info(self, user_id: str, payload: dict[str, Any]) -> UserResult:
        fields = filter_or_raise(USER_UPDATE_SHAPE, payload)
        if not fields:
            raise ValidationException("No fields to update")
        async with self.uow:
            user = await self.user_repo.update_fields(user_id, fields)
            if user is None:
                raise ResourceNotFoundException("user", user_id)
        await self.invalidator.write_through(
            Mutation.USER_PROFILE_UPDATED, user.id, user
        )
        return user

    async def update_password(
        self, user_id: str, old_password: str, new_password: str
    ) -> UserResult:
        user = await self._require_user(user_id)
        if not user.has_password:
            raise ValidationException(
                "This account has no password yet; use create-password", "old_password"
            )
        if not await self.user_repo.verify_password(user_id, old_password):
            raise ValidationException("Incorrect old password", "old_password")
        async with self.uow:
            updated = await self.user_repo.set_password(user_id, new_password)
            if updated is None:
                raise ResourceNotFoundException("user", user_id)
        await self.invalidator.write_through(
            Mutation.USER_PASSWORD_CHANGED, user_id, updated
        )
        return updated

    async def create_password(self, user_id: str, new_password: str) -> UserResult:
        """Set a first password on an OAuth account."""
        user = await self._require_user(user_id)
        if user.has_password:
            raise ValidationException("You already have a password", "password")
        async with self.uow:
            updated = await self.user_repo.set_password(user_id, new_password)
            if updated is None:
                raise ResourceNotFoundException("user", user_id)
        await self.invalidator.write_through(
            Mutation.USER_PASSWORD_CHANGED, user_id, updated
        )
        return updated

    async def update_avatar(self, user_id: str, image: ImageUpload) -> UserResult:
        """Replace the avatar. A failure destroying the previous image aborts the update."""
        user = await self._require_user(user_id)
        previous = (user.avatar or {}).get("public_id")
        if previous:
            await self.storage.destroy(previous)
        stored = await self.storage.upload(image, FOLDER_AVATAR)
        async with self.uow:
            updated = await self.user_repo.update_fields(
                user_id, {"avatar": stored.as_dict()}
            )
            if updated is None:
                raise ResourceNotFoundException("user", user_id)
        await self.invalidator.write_through(
            Mutation.USER_AVATAR_UPDATED, user_id, updated
        )
        return updated

    # ---- Admin ----

    async def list_users(self, admin_id: str) -> list[dict[str, Any]]:
        """All users, newest first, cached per admin for 7 days."""
        return await read_through(
            self.cache,
            admin_users_key(admin_id),
            self.user_repo.list_all,
            ttl=USER_CACHE_TTL_SECONDS,
        )

    async def update_role(self, email: str, role: UserRole) -> UserResult:
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise ResourceNotFoundException("user", email)
        if user.role is role:
            raise ValidationException(f"Role already {role.value}", "role")
        async with self.uow:
            updated = await self.user_repo.update_fields(user.id, {"role": role})
            if updated is None:
                raise ResourceNotFoundException("user", user.id)
        await self.invalidator.write_through(
            Mutation.USER_ROLE_CHANGED, updated.id, updated
        )
        logger.info("User %s role changed to %s", updated.id, role.value)
        return updated

    @traced("users.delete_user")
    async def delete_user(self, *, user_id: str) -> None:
        """Delete the user and everything they authored, in one transaction.

        Orders, notifications, reviews, questions and replies go with the
        account; course ratings are recomputed. The avatar image is destroyed
        first and a storage failure aborts the deletion.
        """
        user = await self._require_user(user_id)
        avatar_id = (user.avatar or {}).get("public_id")
        if avatar_id:
            await self.storage.destroy(avatar_id)
        async with self.uow:
            orders = await self.order_repo.delete_by_user(user_id)
            courses = await self.course_repo.remove_user_content(user_id)
            notifications = await self.notification_repo.delete_by_user(user_id)
            await self.user_repo.delete(user_id)
        await self.invalidator.invalidate(Mutation.USER_DELETED, user_id)
        logger.info(
            "Deleted user %s (%s orders, %s courses touched, %s notifications)",
            user_id,
            orders,
            courses,
            notifications,
        )
