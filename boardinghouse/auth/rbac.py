"""Role to scope mapping for staff accounts.

Scopes are ``<resource>.<action>`` strings declared by each endpoint. ADMIN
holds the wildcard; MANAGER runs the front desk but cannot delete contracts or
manage staff accounts.
"""

from __future__ import annotations

from collections.abc import Iterable

from boardinghouse.core.exceptions import AuthorizationError

WILDCARD = "*"

_DESK_RESOURCES = ("rooms", "tenants", "contracts", "bills", "residency")

ROLE_SCOPES: dict[str, frozenset[str]] = {
    "ADMIN": frozenset({WILDCARD}),
    "MANAGER": frozenset(
        {f"{resource}.{action}" for resource in _DESK_RESOURCES for action in ("read", "write")}
        | {"contracts.transition", "reports.read", "reports.export"}
    ),
}


def get_scopes_for_role(role: str) -> frozenset[str]:
    return ROLE_SCOPES.get(role.upper(), frozenset())


def has_scopes(role: str, required_scopes: Iterable[str]) -> bool:
    granted = get_scopes_for_role(role)
    return WILDCARD in granted or granted.issuperset(required_scopes)


def require_scopes(role: str, required_scopes: Iterable[str]) -> None:
    """Raise :class:`AuthorizationError` naming the scopes ``role`` lacks."""
    required = set(required_scopes)
    if has_scopes(role, required):
        return
    missing = sorted(required - get_scopes_for_role(role))
    raise AuthorizationError(f"Missing required scopes: {', '.join(missing)}")
