"""Password hashing helpers."""

from __future__ import annotations

from passlib.hash import pbkdf2_sha256


def hash_password(password: str) -> str:
    return pbkdf2_sha256.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return pbkdf2_sha256.verify(password, hashed_password)
    except ValueError:
        # Malformed stored hash.
        return False
