"""Security: password hashing and signed tokens."""

from lms.infrastructure.security.jwt import JwtTokenService, create_token, verify_token
from lms.infrastructure.security.password import (
    BcryptPasswordHasher,
    check_password,
    hash_password,
)

__all__ = [
    "BcryptPasswordHasher",
    "JwtTokenService",
    "check_password",
    "create_token",
    "hash_password",
    "verify_token",
]
