"""Password hashing: bcrypt over a SHA-256 pre-hash.

bcrypt only reads the first 72 bytes of its input; hashing the password with
SHA-256 first (base64, 44 bytes) keeps every character significant.
"""

import asyncio
import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Return a bcrypt hash (random salt) of the pre-hashed password."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, hashed_password: str | None) -> bool:
    """Return True if password matches hashed_password. A missing or malformed hash never matches."""
    if not hashed_password:
        return False
    try:
        return bool(bcrypt.checkpw(_prehash(password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError):
        return False


class BcryptPasswordHasher:
    """IPasswordHasher backed by bcrypt; hashing runs in a worker thread."""

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password)

    async def verify(self, password: str, hashed: str | None) -> bool:
        return await asyncio.to_thread(check_password, password, hashed)
