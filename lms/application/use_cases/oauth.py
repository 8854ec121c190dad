"""Social login (Google, GitHub): signed state, code exchange, account linking."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from lms.application.dtos.auth import AuthTokens, TokenLifetimes
from lms.application.dtos.user import OAuthProfile, UserResult
from lms.application.services.cache_policy import CacheInvalidator, Mutation
from lms.application.use_cases.users import issue_session_tokens
from lms.core.constants import TOKEN_OAUTH_STATE
from lms.domain.enums import AuthProvider
from lms.domain.exceptions import AuthenticationException, ValidationException
from lms.shared.telemetry.logging import get_logger
from lms.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from lms.application.interfaces.repositories import IUserRepository
    from lms.application.interfaces.services import (
        ICacheService,
        IOAuthProvider,
        ITokenService,
        IUnitOfWork,
    )

logger = get_logger(__name__)


class OAuthService:
    """Start and complete an OAuth login against a configured provider."""

    def __init__(
        self,
        user_repo: IUserRepository,
        uow: IUnitOfWork,
        cache: ICacheService | None,
        tokens: ITokenService,
        providers: Mapping[AuthProvider, IOAuthProvider],
        lifetimes: TokenLifetimes,
    ) -> None:
        self.user_repo = user_repo
        self.uow = uow
        self.invalidator = CacheInvalidator(cache)
        self.tokens = tokens
        self.providers = providers
        self.lifetimes = lifetimes

    def _provider(self, provider: AuthProvider) -> IOAuthProvider:
        driver = self.providers.get(provider)
        if driver is None:
            raise ValidationException(
                f"Login with {provider.value} is not configured", "provider"
            )
        return driver

    def start(self, provider: AuthProvider, redirect_uri: str) -> str:
        """Return the provider consent URL with a signed, short-lived state."""
        driver = self._provider(provider)
        state = self.tokens.issue(
            provider.value,
            TOKEN_OAUTH_STATE,
            self.lifetimes.oauth_state,
            {"nonce": generate_cuid()},
        )
        return driver.authorization_url(state, redirect_uri)

    async def complete(
        self, provider: AuthProvider, code: str, state: str, redirect_uri: str
    ) -> AuthTokens:
        """Verify state, exchange code, link or create the account and start a session."""
        driver = self._provider(provider)
        claims = self.tokens.decode(state, TOKEN_OAUTH_STATE)
        if claims.get("sub") != provider.value:
            raise AuthenticationException("OAuth state does not match provider")
        profile = await driver.fetch_profile(code, redirect_uri)
        user, _ = await self.link_identity(profile)
        session = issue_session_tokens(self.tokens, self.lifetimes, user)
        await self.invalidator.write_through(Mutation.USER_LOGGED_IN, user.id, user)
        return session

    async def link_identity(self, profile: OAuthProfile) -> tuple[UserResult, bool]:
        """Return (user, created): the account with the profile's e-mail, created if missing."""
        existing = await self.user_repo.get_by_email(profile.email)
        if existing is not None:
            return existing, False
        avatar = {"public_id": None, "url": profile.avatar_url} if profile.avatar_url else None
        async with self.uow:
            user = await self.user_repo.create_user(
                profile.name,
                profile.email,
                provider=profile.provider,
                avatar=avatar,
                is_verified=True,
            )
        await self.invalidator.invalidate(Mutation.OAUTH_USER_CREATED, user.id)
        logger.info("Created %s account %s", profile.provider.value, user.id)
        return user, True
