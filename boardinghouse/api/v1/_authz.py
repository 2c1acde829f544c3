"""Bearer-token authorization used by every protected route."""

from __future__ import annotations

from boardinghouse.auth.rbac import require_scopes
from boardinghouse.core.dependencies import CurrentUser, get_current_user
from boardinghouse.core.exceptions import AuthenticationError


def _extract_bearer_token(authorization: str | None) -> str:
    scheme, _, token = (authorization or "").strip().partition(" ")
    if not scheme:
        raise AuthenticationError("Authorization header is required.")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must use Bearer token.")
    return token.strip()


def authorize(authorization: str | None, scopes: list[str]) -> CurrentUser:
    """Resolve the caller from ``Authorization`` and require ``scopes``.

    Routes call this first; the raised errors become 401/403 responses.
    """
    user = get_current_user(_extract_bearer_token(authorization))
    require_scopes(user.role, scopes)
    return user
