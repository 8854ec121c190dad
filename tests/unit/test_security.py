"""Signed tokens and password hashing."""

from datetime import timedelta

import pytest

from lms.core.constants import TOKEN_ACCESS, TOKEN_REFRESH
from lms.domain.exceptions import AuthenticationException
from lms.infrastructure.security import (
    BcryptPasswordHasher,
    check_password,
    create_token,
    hash_password,
    verify_token,
)


class TestTokens:
    def test_round_trip_keeps_extra_claims(self) -> None:
        token = create_token("u1", TOKEN_ACCESS, timedelta(minutes=5), {"role": "admin"})
        claims = verify_token(token, TOKEN_ACCESS)
        assert claims["sub"] == "u1"
        assert claims["role"] == "admin"

    def test_type_is_enforced(self) -> None:
        token = create_token("u1", TOKEN_REFRESH, timedelta(minutes=5))
        with pytest.raises(AuthenticationException, match="Invalid token type"):
            verify_token(token, TOKEN_ACCESS)

    def test_expired_token(self) -> None:
        token = create_token("u1", TOKEN_ACCESS, timedelta(seconds=-1))
        with pytest.raises(AuthenticationException, match="Invalid or expired"):
            verify_token(token, TOKEN_ACCESS)

    def test_reserved_claims_cannot_be_overridden(self) -> None:
        token = create_token("u1", TOKEN_ACCESS, timedelta(minutes=5), {"sub": "admin", "typ": "x"})
        claims = verify_token(token, TOKEN_ACCESS)
        assert claims["sub"] == "u1"


class TestPasswords:
    def test_hash_and_check(self) -> None:
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert check_password("correct horse", hashed)
        assert not check_password("wrong horse", hashed)

    def test_long_passwords_differ_after_72_bytes(self) -> None:
        base = "x" * 80
        hashed = hash_password(base + "a")
        assert not check_password(base + "b", hashed)

    @pytest.mark.parametrize("hashed", [None, "", "not-a-bcrypt-hash"])
    def test_missing_or_malformed_hash_never_matches(self, hashed) -> None:
        assert not check_password("anything", hashed)

    async def test_async_hasher(self) -> None:
        hasher = BcryptPasswordHasher()
        hashed = await hasher.hash("s3cret-pass")
        assert await hasher.verify("s3cret-pass", hashed)
        assert not await hasher.verify("other", hashed)
