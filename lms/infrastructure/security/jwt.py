"""Signed tokens (python-jose) for access, refresh, activation and OAuth state.

Every token carries sub, exp and a ``typ`` claim; decoding checks the type so
a refresh token is never accepted where an access token is expected.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from lms.core.config import get_settings
from lms.domain.exceptions import AuthenticationException

_TYPE_CLAIM = "typ"


def create_token(
    subject: str,
    token_type: str,
    expires_delta: timedelta,
    claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed JWT.

    Args:
        subject: Value of the sub claim (user id, e-mail or OAuth provider).
        token_type: One of the TOKEN_* constants.
        expires_delta: Lifetime from now.
        claims: Extra claims; sub, exp and typ are always overwritten.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = dict(claims or {})
    to_encode.update(
        {
            "sub": subject,
            _TYPE_CLAIM: token_type,
            "exp": datetime.now(UTC) + expires_delta,
        }
    )
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str, token_type: str) -> dict[str, Any]:
    """Verify signature, expiry and type; return the payload.

    Raises:
        AuthenticationException: If the token is invalid, expired, missing
            sub/exp, or of another type.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise AuthenticationException(f"Invalid or expired token: {e!s}") from e
    if payload.get(_TYPE_CLAIM) != token_type:
        raise AuthenticationException("Invalid token type")
    return payload


class JwtTokenService:
    """ITokenService over create_token/verify_token."""

    def issue(
        self,
        subject: str,
        token_type: str,
        expires_delta: timedelta,
        claims: dict[str, Any] | None = None,
    ) -> str:
        return create_token(subject, token_type, expires_delta, claims)

    def decode(self, token: str, token_type: str) -> dict[str, Any]:
        return verify_token(token, token_type)
