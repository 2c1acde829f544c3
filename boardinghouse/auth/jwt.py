"""Signed HS256 tokens for staff sessions.

Two kinds of token are issued at login: a short-lived ``access`` token sent
with every API call and a longer-lived ``refresh`` token that can only be
traded for a new pair. Both carry the same subject claims plus ``token_use``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from boardinghouse.core.exceptions import AuthenticationError

ACCESS = "access"
REFRESH = "refresh"

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _pack(obj: dict[str, Any]) -> str:
    raw = json.dumps(obj, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _unpack(segment: str) -> dict[str, Any]:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))


def _signature(signing_input: str, secret: str) -> str:
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    mac = hmac.new(secret.encode("utf-8"), signing_input.encode("utf-8"), hashlib.sha256)
    return base64.urlsafe_b64encode(mac.digest()).decode("ascii").rstrip("=")


@dataclass(frozen=True)
class TokenSubject:
    """Who a token speaks for."""

    user_id: int
    username: str
    role: str
    permissions_version: int = 1

    def claims(self, token_use: str) -> dict[str, Any]:
        return {
            "sub": str(self.user_id),
            "username": self.username,
            "role": self.role,
            "permissions_version": self.permissions_version,
            "token_use": token_use,
        }


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


def encode_jwt(payload: dict[str, Any], secret: str, ttl: timedelta) -> str:
    """Sign ``payload`` adding ``iat``, ``exp`` and ``jti`` unless already set."""
    issued = datetime.now(timezone.utc)
    body = {
        "iat": int(issued.timestamp()),
        "exp": int((issued + ttl).timestamp()),
        "jti": uuid.uuid4().hex,
        **payload,
    }
    signing_input = f"{_pack(_HEADER)}.{_pack(body)}"
    return f"{signing_input}.{_signature(signing_input, secret)}"


def decode_jwt(
    token: str,
    secret: str,
    expected_use: str | None = None,
) -> dict[str, Any]:
    """Verify the signature and expiry of ``token`` and return its claims.

    When ``expected_use`` is given the ``token_use`` claim must match it, so a
    refresh token cannot be replayed as an access token or the other way round.
    """
    segments = token.split(".")
    if len(segments) != 3:
        raise AuthenticationError("Invalid token format.")
    header_segment, payload_segment, signature = segments

    expected = _signature(f"{header_segment}.{payload_segment}", secret)
    if not hmac.compare_digest(expected, signature):
        raise AuthenticationError("Invalid token signature.")

    try:
        claims = _unpack(payload_segment)
    except ValueError as exc:
        raise AuthenticationError("Invalid token payload.") from exc

    if "exp" not in claims:
        raise AuthenticationError("Token is missing exp claim.")
    if int(claims["exp"]) < int(datetime.now(timezone.utc).timestamp()):
        raise AuthenticationError("Token has expired.")
    if expected_use is not None and claims.get("token_use") != expected_use:
        raise AuthenticationError(f"Expected a {expected_use} token.")
    return claims


def create_token_pair(
    user_id: int,
    username: str,
    role: str,
    secret: str,
    permissions_version: int = 1,
    access_ttl_minutes: int = 60,
    refresh_ttl_days: int = 14,
) -> TokenPair:
    """Issue the access and refresh tokens handed out at login."""
    subject = TokenSubject(
        user_id=user_id,
        username=username,
        role=role,
        permissions_version=permissions_version,
    )
    return TokenPair(
        access_token=encode_jwt(subject.claims(ACCESS), secret, timedelta(minutes=access_ttl_minutes)),
        refresh_token=encode_jwt(subject.claims(REFRESH), secret, timedelta(days=refresh_ttl_days)),
    )
