"""
Admin credential and session-token helpers.

- Hash admin passwords with Argon2id
- Generate 64-hex session and preview tokens
- Validate token shape before any database lookup
"""
from __future__ import annotations

import re
import secrets
from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from argon2.low_level import Type

_hasher = PasswordHasher(time_cost=2, memory_cost=102400, parallelism=8, hash_len=32, type=Type.ID)

SESSION_TOKEN_BYTES = 32
_TOKEN_RE = re.compile(r"^[a-f0-9]{64}$")


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, encoded_hash: str) -> bool:
    if not password or not encoded_hash:
        return False
    try:
        return _hasher.verify(encoded_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _hasher.hash(secrets.token_hex(16))


def verify_against_dummy(password: str) -> bool:
    """Pay the cost of one verify for a username that does not exist; always False."""
    verify_password(password, _dummy_hash())
    return False


def password_needs_rehash(encoded_hash: str) -> bool:
    try:
        return _hasher.check_needs_rehash(encoded_hash)
    except InvalidHashError:
        return True


def generate_session_token() -> str:
    """Return 32 random bytes as 64 lowercase hex characters."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)


def is_valid_token_format(token: str | None) -> bool:
    return bool(token) and bool(_TOKEN_RE.match(token))
