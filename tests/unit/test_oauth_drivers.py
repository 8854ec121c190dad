"""OAuth drivers against a mocked provider (httpx.MockTransport)."""

from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from pydantic import SecretStr

from lms.domain.enums import AuthProvider
from lms.infrastructure.exceptions import OAuthProviderError
from lms.infrastructure.external.oauth import GithubDriver, GoogleDriver, OAuthDriverRegistry

REDIRECT = "http://localhost:8000/api/v1/user/auth/github/callback"


def _client(routes: dict[str, httpx.Response]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        url = request.url
        key = f"{request.method} {url.scheme}://{url.host}{url.path}"
        return routes.get(key, httpx.Response(404))

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_authorization_url_carries_state_and_scopes() -> None:
    driver = GoogleDriver("cid", "secret", httpx.AsyncClient())
    url = urlparse(driver.authorization_url("state-1", REDIRECT))
    params = parse_qs(url.query)
    assert url.netloc == "accounts.google.com"
    assert params["state"] == ["state-1"]
    assert params["scope"] == ["openid email profile"]
    assert params["prompt"] == ["select_account"]


async def test_github_private_email_falls_back_to_primary_verified() -> None:
    client = _client(
        {
            f"POST {GithubDriver.TOKEN_ENDPOINT}": httpx.Response(200, json={"access_token": "gh-token"}),
            f"GET {GithubDriver.USER_ENDPOINT}": httpx.Response(
                200, json={"id": 42, "login": "octocat", "email": None, "avatar_url": "https://a/42"}
            ),
            f"GET {GithubDriver.EMAILS_ENDPOINT}": httpx.Response(
                200,
                json=[
                    {"email": "old@example.com", "primary": False, "verified": True},
                    {"email": "octo@example.com", "primary": True, "verified": True},
                ],
            ),
        }
    )
    profile = await GithubDriver("cid", "secret", client).fetch_profile("code-1", REDIRECT)
    assert profile.provider is AuthProvider.GITHUB
    assert profile.provider_user_id == "42"
    assert profile.email == "octo@example.com"
    assert profile.name == "octocat"
    assert profile.avatar_url == "https://a/42"


async def test_google_profile() -> None:
    client = _client(
        {
            f"POST {GoogleDriver.TOKEN_ENDPOINT}": httpx.Response(200, json={"access_token": "g-token"}),
            f"GET {GoogleDriver.USERINFO_ENDPOINT}": httpx.Response(
                200, json={"sub": "g-1", "email": "ada@example.com", "name": "Ada"}
            ),
        }
    )
    profile = await GoogleDriver("cid", "secret", client).fetch_profile("code-1", REDIRECT)
    assert (profile.provider_user_id, profile.email, profile.name) == ("g-1", "ada@example.com", "Ada")


async def test_rejected_code_is_provider_error() -> None:
    client = _client({f"POST {GoogleDriver.TOKEN_ENDPOINT}": httpx.Response(400, json={"error": "invalid_grant"})})
    with pytest.raises(OAuthProviderError, match="token exchange returned status 400"):
        await GoogleDriver("cid", "secret", client).fetch_profile("bad", REDIRECT)


async def test_account_without_email_is_rejected() -> None:
    client = _client(
        {
            f"POST {GithubDriver.TOKEN_ENDPOINT}": httpx.Response(200, json={"access_token": "t"}),
            f"GET {GithubDriver.USER_ENDPOINT}": httpx.Response(200, json={"id": 1, "email": None}),
            f"GET {GithubDriver.EMAILS_ENDPOINT}": httpx.Response(200, json=[]),
        }
    )
    with pytest.raises(OAuthProviderError, match="no verified e-mail"):
        await GithubDriver("cid", "secret", client).fetch_profile("code", REDIRECT)


def test_registry_only_builds_configured_providers() -> None:
    settings = SimpleNamespace(
        google_client_id="gid",
        google_client_secret=SecretStr("gsecret"),
        github_client_id=None,
        github_client_secret=None,
    )
    drivers = OAuthDriverRegistry.configured(settings, httpx.AsyncClient())
    assert set(drivers) == {AuthProvider.GOOGLE}
    assert drivers[AuthProvider.GOOGLE].client_secret == "gsecret"
