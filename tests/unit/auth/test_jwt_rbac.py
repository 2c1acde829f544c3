from __future__ import annotations

from datetime import timedelta

import pytest

from boardinghouse.auth.jwt import ACCESS, create_token_pair, decode_jwt, encode_jwt
from boardinghouse.auth.passwords import hash_password, verify_password
from boardinghouse.auth.rbac import has_scopes, require_scopes
from boardinghouse.core.exceptions import AuthenticationError, AuthorizationError


def test_jwt_roundtrip_contains_required_claims():
    tokens = create_token_pair(user_id=10, username="desk", role="MANAGER", secret="test-secret")
    claims = decode_jwt(tokens.access_token, secret="test-secret")
    assert claims["sub"] == "10"
    assert claims["username"] == "desk"
    assert claims["role"] == "MANAGER"
    assert claims["token_use"] == "access"
    assert "exp" in claims
    assert "iat" in claims
    assert "jti" in claims
    assert decode_jwt(tokens.refresh_token, secret="test-secret")["token_use"] == "refresh"


def test_jwt_rejects_tampered_signature_and_expired_token():
    tokens = create_token_pair(user_id=1, username="admin", role="ADMIN", secret="test-secret")
    with pytest.raises(AuthenticationError):
        decode_jwt(tokens.access_token, secret="other-secret")

    expired = encode_jwt({"sub": "1"}, secret="test-secret", ttl=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError, match="expired"):
        decode_jwt(expired, secret="test-secret")


def test_jwt_rejects_refresh_token_where_access_expected():
    tokens = create_token_pair(user_id=3, username="desk", role="MANAGER", secret="test-secret")
    with pytest.raises(AuthenticationError, match="access"):
        decode_jwt(tokens.refresh_token, secret="test-secret", expected_use=ACCESS)


def test_rbac_manager_cannot_delete_contracts():
    require_scopes("MANAGER", ["contracts.transition", "reports.export"])
    with pytest.raises(AuthorizationError):
        require_scopes("MANAGER", ["contracts.delete"])


def test_rbac_admin_has_every_scope_and_unknown_role_has_none():
    assert has_scopes("admin", ["contracts.delete", "users.manage"]) is True
    assert has_scopes("viewer", ["rooms.read"]) is False


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret-pass")
    assert verify_password("s3cret-pass", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert verify_password("s3cret-pass", "not-a-hash") is False
