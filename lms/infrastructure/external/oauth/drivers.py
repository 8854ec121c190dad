"""OAuth login drivers (Google, GitHub): authorization URL, code exchange, profile."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar
from urllib.parse import urlencode

import httpx

from lms.application.dtos.user import OAuthProfile
from lms.core.config import Settings
from lms.domain.enums import AuthProvider
from lms.infrastructure.exceptions import OAuthProviderError
from lms.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class OAuthDriver(ABC):
    """Abstract OAuth login driver over a shared httpx.AsyncClient."""

    PROVIDER: ClassVar[AuthProvider]
    AUTHORIZATION_ENDPOINT: ClassVar[str]
    TOKEN_ENDPOINT: ClassVar[str]
    SCOPES: ClassVar[tuple[str, ...]]

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        http_client: httpx.AsyncClient,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.http = http_client

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        """Build the provider consent URL with state."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.SCOPES),
            "state": state,
            **self._authorization_params(),
        }
        return f"{self.AUTHORIZATION_ENDPOINT}?{urlencode(params)}"

    def _authorization_params(self) -> dict[str, Any]:
        return {}

    def _fail(self, action: str, response: httpx.Response) -> OAuthProviderError:
        logger.error(
            "%s %s failed: status=%d",
            self.PROVIDER.value,
            action,
            response.status_code,
        )
        return OAuthProviderError(
            self.PROVIDER.value, f"{action} returned status {response.status_code}"
        )

    async def _exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange authorization code for a provider access token."""
        try:
            response = await self.http.post(
                self.TOKEN_ENDPOINT,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": redirect_uri,
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise OAuthProviderError(self.PROVIDER.value, str(e)) from e
        if response.status_code != 200:
            raise self._fail("token exchange", response)
        token = response.json().get("access_token")
        if not token:
            raise OAuthProviderError(self.PROVIDER.value, "no access token returned")
        return str(token)

    async def _get_json(self, url: str, access_token: str) -> Any:
        try:
            response = await self.http.get(
                url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise OAuthProviderError(self.PROVIDER.value, str(e)) from e
        if response.status_code != 200:
            raise self._fail("profile request", response)
        return response.json()

    async def fetch_profile(self, code: str, redirect_uri: str) -> OAuthProfile:
        """Exchange code and return the signed-in user's profile."""
        access_token = await self._exchange_code(code, redirect_uri)
        return await self._profile(access_token)

    @abstractmethod
    async def _profile(self, access_token: str) -> OAuthProfile:
        """Provider-specific profile lookup."""


class GoogleDriver(OAuthDriver):
    """Google OAuth (OpenID Connect userinfo)."""

    PROVIDER = AuthProvider.GOOGLE
    AUTHORIZATION_ENDPOINT = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"
    USERINFO_ENDPOINT = "https://openidconnect.googleapis.com/v1/userinfo"
    SCOPES = ("openid", "email", "profile")

    def _authorization_params(self) -> dict[str, Any]:
        return {"prompt": "select_account"}

    async def _profile(self, access_token: str) -> OAuthProfile:
        data = await self._get_json(self.USERINFO_ENDPOINT, access_token)
        email = data.get("email")
        if not email:
            raise OAuthProviderError(self.PROVIDER.value, "account has no e-mail")
        return OAuthProfile(
            provider=self.PROVIDER,
            provider_user_id=str(data.get("sub", "")),
            email=email,
            name=data.get("name") or email.split("@")[0],
            avatar_url=data.get("picture"),
            raw=data,
        )


class GithubDriver(OAuthDriver):
    """GitHub OAuth. Falls back to /user/emails when the profile e-mail is private."""

    PROVIDER = AuthProvider.GITHUB
    AUTHORIZATION_ENDPOINT = "https://github.com/login/oauth/authorize"
    TOKEN_ENDPOINT = "https://github.com/login/oauth/access_token"
    USER_ENDPOINT = "https://api.github.com/user"
    EMAILS_ENDPOINT = "https://api.github.com/user/emails"
    SCOPES = ("read:user", "user:email")

    async def _primary_email(self, access_token: str) -> str | None:
        emails = await self._get_json(self.EMAILS_ENDPOINT, access_token)
        for entry in emails or []:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None

    async def _profile(self, access_token: str) -> OAuthProfile:
        data = await self._get_json(self.USER_ENDPOINT, access_token)
        email = data.get("email") or await self._primary_email(access_token)
        if not email:
            raise OAuthProviderError(self.PROVIDER.value, "account has no verified e-mail")
        return OAuthProfile(
            provider=self.PROVIDER,
            provider_user_id=str(data.get("id", "")),
            email=email,
            name=data.get("name") or data.get("login") or email.split("@")[0],
            avatar_url=data.get("avatar_url"),
            raw=data,
        )


class OAuthDriverRegistry:
    """Registry of OAuth drivers by provider."""

    _drivers: ClassVar[dict[AuthProvider, type[OAuthDriver]]] = {
        AuthProvider.GOOGLE: GoogleDriver,
        AuthProvider.GITHUB: GithubDriver,
    }

    @classmethod
    def configured(
        cls, settings: Settings, http_client: httpx.AsyncClient
    ) -> dict[AuthProvider, OAuthDriver]:
        """Return drivers for providers with a client id and secret configured."""
        credentials = {
            AuthProvider.GOOGLE: (settings.google_client_id, settings.google_client_secret),
            AuthProvider.GITHUB: (settings.github_client_id, settings.github_client_secret),
        }
        drivers: dict[AuthProvider, OAuthDriver] = {}
        for provider, (client_id, secret) in credentials.items():
            if client_id and secret:
                drivers[provider] = cls._drivers[provider](
                    client_id, secret.get_secret_value(), http_client
                )
        return drivers
