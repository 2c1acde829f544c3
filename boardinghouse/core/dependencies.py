"""Request-scoped providers shared by the API routers."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from boardinghouse.auth.jwt import ACCESS, decode_jwt
from boardinghouse.core.config import Config, get_config
from boardinghouse.core.exceptions import AuthenticationError
from boardinghouse.database.db import get_db


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    username: str
    role: str
    permissions_version: int
    claims: dict[str, Any]


def get_settings() -> Config:
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """FastAPI dependency; tests override it with their own sessionmaker."""
    yield from get_db()


def read_token_claims(token: str, token_use: str, settings: Config | None = None) -> dict[str, Any]:
    """Decode ``token`` and reject it when issued under older permissions."""
    cfg = settings or get_settings()
    claims = decode_jwt(token, secret=cfg.JWT_SECRET, expected_use=token_use)
    if int(claims.get("permissions_version", 0)) != cfg.JWT_PERMISSIONS_VERSION:
        raise AuthenticationError("Token permissions are outdated; log in again.")
    return claims


def get_current_user(token: str, settings: Config | None = None) -> CurrentUser:
    claims = read_token_claims(token, ACCESS, settings)
    try:
        return CurrentUser(
            user_id=int(claims["sub"]),
            username=str(claims["username"]),
            role=str(claims["role"]).upper(),
            permissions_version=int(claims["permissions_version"]),
            claims=claims,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid auth claims.") from exc
