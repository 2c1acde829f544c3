"""User service for staff accounts and credential checks."""

from __future__ import annotations

import logging

from sqlalchemy import select

from boardinghouse.auth.passwords import hash_password, verify_password
from boardinghouse.core.exceptions import AuthenticationError, ConflictError, ValidationError
from boardinghouse.models import User, UserRole
from boardinghouse.services.base_service import BaseService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class UserService(BaseService):
    def create_user(
        self,
        username: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.MANAGER,
    ) -> User:
        username = username.strip().lower()
        if not username:
            raise ValidationError("Username is required", field="username")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )
        if self.db.scalar(select(User.id).where(User.username == username)) is not None:
            raise ConflictError(f"Username {username} is already taken", field="username")

        user = User(
            username=username,
            full_name=full_name.strip() or username,
            hashed_password=hash_password(password),
            role=UserRole(role),
        )
        self.db.add(user)
        self.commit()
        logger.info("user.created", extra={"event": "user.created", "user_id": user.id, "role": user.role.value})
        return user

    def get_user(self, user_id: int) -> User:
        return self._get_or_raise(User, user_id, "User")

    def authenticate(self, username: str, password: str) -> User:
        """Return the active user matching the credentials.

        Unknown users, wrong passwords and disabled accounts all raise the same
        :class:`AuthenticationError`.
        """
        user = self.db.scalar(select(User).where(User.username == username.strip().lower()))
        if user is None or not user.is_active or not verify_password(password, user.hashed_password):
            logger.warning("auth.login_failed", extra={"event": "auth.login_failed", "username": username})
            raise AuthenticationError("Invalid credentials.")
        return user

    def change_password(self, user_id: int, current_password: str, new_password: str) -> User:
        user = self.get_user(user_id)
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect", field="current_password")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="new_password"
            )
        user.hashed_password = hash_password(new_password)
        self.commit()
        logger.info("user.password_changed", extra={"event": "user.password_changed", "user_id": user.id})
        return user
