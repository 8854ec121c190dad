"""DTOs for authentication flows (tokens, activation)."""

from dataclasses import dataclass
from datetime import timedelta

from lms.application.dtos.user import UserResult


@dataclass(frozen=True)
class AuthTokens:
    """Access/refresh token pair issued on login or OAuth callback."""

    access_token: str
    refresh_token: str
    user: UserResult


@dataclass(frozen=True)
class ActivationTicket:
    """Registration result: signed token the client sends back with the mailed code."""

    activation_token: str
    email: str


@dataclass(frozen=True)
class PendingRegistration:
    """Claims carried by an activation token (hashes only, never the raw password or code)."""

    name: str
    email: str
    hashed_password: str
    code_hash: str


@dataclass(frozen=True)
class TokenLifetimes:
    """Lifetimes of the signed tokens issued by the auth use cases."""

    access: timedelta
    refresh: timedelta
    activation: timedelta
    oauth_state: timedelta
