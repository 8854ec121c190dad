"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the cache and application use
cases. All use cases are built from infrastructure implementations here;
routes depend only on these dependencies, not on infrastructure directly.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, File, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.dtos.auth import TokenLifetimes
from lms.application.dtos.media import ImageUpload
from lms.application.dtos.user import UserResult
from lms.application.interfaces.services import (
    ICacheService,
    IImageStorage,
    IMailer,
    ITokenService,
)
from lms.application.use_cases import (
    AnalyticsService,
    CourseService,
    LayoutService,
    NotificationService,
    OAuthService,
    OrderService,
    UserService,
)
from lms.core.config import Settings, get_settings
from lms.core.constants import ACCESS_TOKEN_COOKIE, TOKEN_ACCESS
from lms.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from lms.infrastructure.external.mail import SmtpMailer
from lms.infrastructure.external.oauth import OAuthDriverRegistry
from lms.infrastructure.external.storage import StorageFactory
from lms.infrastructure.persistence.database import get_db
from lms.infrastructure.persistence.repositories import (
    CourseRepository,
    LayoutRepository,
    NotificationRepository,
    OrderRepository,
    UserRepository,
)
from lms.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from lms.infrastructure.security import BcryptPasswordHasher, JwtTokenService

_http_bearer = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


def token_lifetimes(settings: Settings) -> TokenLifetimes:
    """Token lifetimes from settings."""
    return TokenLifetimes(
        access=timedelta(minutes=settings.access_token_expire_minutes),
        refresh=timedelta(days=settings.refresh_token_expire_days),
        activation=timedelta(minutes=settings.activation_token_expire_minutes),
        oauth_state=timedelta(minutes=settings.oauth_state_expire_minutes),
    )


def get_cache(request: Request) -> ICacheService | None:
    """Cache from app lifespan; None when Redis is disabled."""
    return getattr(request.app.state, "cache", None)


CacheDep = Annotated[ICacheService | None, Depends(get_cache)]


def get_mailer() -> IMailer:
    return SmtpMailer(get_settings())


def get_storage() -> IImageStorage:
    """Image storage for the configured backend (local or s3)."""
    return StorageFactory.create_storage_service(get_settings())


def get_token_service() -> ITokenService:
    return JwtTokenService()


MailerDep = Annotated[IMailer, Depends(get_mailer)]
StorageDep = Annotated[IImageStorage, Depends(get_storage)]
TokensDep = Annotated[ITokenService, Depends(get_token_service)]


async def get_user_service(
    db: DbSession,
    cache: CacheDep,
    tokens: TokensDep,
    mailer: MailerDep,
    storage: StorageDep,
) -> UserService:
    return UserService(
        user_repo=UserRepository(db),
        course_repo=CourseRepository(db),
        order_repo=OrderRepository(db),
        notification_repo=NotificationRepository(db),
        uow=SqlAlchemyUnitOfWork(db),
        cache=cache,
        tokens=tokens,
        hasher=BcryptPasswordHasher(),
        mailer=mailer,
        storage=storage,
        lifetimes=token_lifetimes(get_settings()),
    )


async def get_oauth_service(
    request: Request, db: DbSession, cache: CacheDep, tokens: TokensDep
) -> OAuthService:
    """OAuth service with drivers for every provider that has credentials configured."""
    settings = get_settings()
    providers = OAuthDriverRegistry.configured(
        settings, getattr(request.app.state, "oauth_http_client", None)
    )
    return OAuthService(
        user_repo=UserRepository(db),
        uow=SqlAlchemyUnitOfWork(db),
        cache=cache,
        tokens=tokens,
        providers=providers,
        lifetimes=token_lifetimes(settings),
    )


async def get_course_service(
    db: DbSession,
    cache: CacheDep,
    mailer: MailerDep,
    storage: StorageDep,
) -> CourseService:
    return CourseService(
        course_repo=CourseRepository(db),
        user_repo=UserRepository(db),
        notification_repo=NotificationRepository(db),
        uow=SqlAlchemyUnitOfWork(db),
        cache=cache,
        storage=storage,
        mailer=mailer,
    )


async def get_order_service(
    db: DbSession,
    cache: CacheDep,
    mailer: MailerDep,
) -> OrderService:
    return OrderService(
        order_repo=OrderRepository(db),
        user_repo=UserRepository(db),
        course_repo=CourseRepository(db),
        notification_repo=NotificationRepository(db),
        uow=SqlAlchemyUnitOfWork(db),
        cache=cache,
        mailer=mailer,
    )


async def get_notification_service(db: DbSession, cache: CacheDep) -> NotificationService:
    return NotificationService(NotificationRepository(db), SqlAlchemyUnitOfWork(db), cache)


async def get_analytics_service(db: DbSession, cache: CacheDep) -> AnalyticsService:
    return AnalyticsService(
        UserRepository(db), CourseRepository(db), OrderRepository(db), cache
    )


async def get_layout_service(db: DbSession, storage: StorageDep) -> LayoutService:
    return LayoutService(LayoutRepository(db), SqlAlchemyUnitOfWork(db), storage)


# ---- Authentication ----


def _access_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    """Bearer header first, then the access_token cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    tokens: TokensDep,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserResult:
    """Resolve the caller from the access token; profile read through ``user:<id>``.

    Raises:
        AuthenticationException: Missing, invalid or expired token, or the
            account no longer exists.
    """
    token = _access_token(request, credentials)
    if not token:
        raise AuthenticationException("Please login to access this resource")
    claims = tokens.decode(token, TOKEN_ACCESS)
    try:
        return await user_service.get_profile(claims["sub"])
    except ResourceNotFoundException as e:
        raise AuthenticationException("User no longer exists") from e


CurrentUser = Annotated[UserResult, Depends(get_current_user)]


async def require_admin(current_user: CurrentUser) -> UserResult:
    """Allow only role admin."""
    if not current_user.is_admin:
        raise AuthorizationException(role=current_user.role.value)
    return current_user


AdminUser = Annotated[UserResult, Depends(require_admin)]


async def read_image(upload: UploadFile) -> ImageUpload:
    """Read an uploaded image into memory; only image/* content types are accepted."""
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationException("Only image uploads are accepted", "file")
    content = await upload.read()
    if not content:
        raise ValidationException("Uploaded image is empty", "file")
    return ImageUpload(
        content=content,
        filename=upload.filename or "image",
        content_type=content_type,
    )


async def optional_image(file: UploadFile | None = File(default=None)) -> ImageUpload | None:
    """Multipart ``file`` field as ImageUpload, or None when absent."""
    if file is None or not file.filename:
        return None
    return await read_image(file)


OptionalImage = Annotated[ImageUpload | None, Depends(optional_image)]
