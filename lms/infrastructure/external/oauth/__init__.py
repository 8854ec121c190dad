"""OAuth identity providers for social login."""

from lms.infrastructure.external.oauth.drivers import (
    GithubDriver,
    GoogleDriver,
    OAuthDriver,
    OAuthDriverRegistry,
)

__all__ = ["GithubDriver", "GoogleDriver", "OAuthDriver", "OAuthDriverRegistry"]
