"""Auth endpoints for API v1."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.auth.jwt import REFRESH, create_token_pair
from boardinghouse.core.config import get_config
from boardinghouse.core.dependencies import get_db_session, read_token_claims
from boardinghouse.core.exceptions import AuthenticationError, NotFoundError
from boardinghouse.models import User
from boardinghouse.schemas.auth import ChangePasswordRequest, LoginRequest, RefreshRequest, TokenResponse, UserResponse
from boardinghouse.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user: User) -> TokenResponse:
    cfg = get_config()
    tokens = create_token_pair(
        user_id=user.id,
        username=user.username,
        role=user.role.value,
        secret=cfg.JWT_SECRET,
        permissions_version=cfg.JWT_PERMISSIONS_VERSION,
        access_ttl_minutes=cfg.JWT_ACCESS_TTL_MINUTES,
        refresh_ttl_days=cfg.JWT_REFRESH_TTL_DAYS,
    )
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db_session)) -> TokenResponse:
    user = UserService(db=db).authenticate(payload.username, payload.password)
    logger.info("auth.login", extra={"event": "auth.login", "user_id": user.id})
    return _issue_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db_session)) -> TokenResponse:
    claims = read_token_claims(payload.refresh_token, REFRESH)
    try:
        user = UserService(db=db).get_user(int(claims["sub"]))
    except (KeyError, ValueError, NotFoundError) as exc:
        raise AuthenticationError("Token subject is not a known user.") from exc
    if not user.is_active:
        raise AuthenticationError("User account is disabled.")
    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
def me(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> UserResponse:
    current = authorize(authorization, scopes=[])
    user = UserService(db=db).get_user(current.user_id)
    return UserResponse.model_validate(user)


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: ChangePasswordRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    current = authorize(authorization, scopes=[])
    UserService(db=db).change_password(current.user_id, payload.current_password, payload.new_password)
