"""Custom exceptions for the boarding house backend."""

from __future__ import annotations


class BoardingHouseError(Exception):
    """Base exception for the application.

    ``field`` names the offending input when one exists so the HTTP layer can
    point the client at it.
    """

    error_code = "error"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(BoardingHouseError):
    """Raised when input validation fails."""

    error_code = "validation_error"


class NotFoundError(BoardingHouseError):
    """Raised when a resource is not found."""

    error_code = "not_found"


class ConflictError(BoardingHouseError):
    """Raised when a write conflicts with current state or a concurrent write."""

    error_code = "conflict"


class StateTransitionError(BoardingHouseError):
    """Raised when a disallowed contract status change is attempted."""

    error_code = "invalid_transition"

    def __init__(self, current: str | None, target: str, reason: str | None = None) -> None:
        source = current or "PENDING"
        message = f"Transition not allowed: {source} -> {target}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, field="status")
        self.current = current
        self.target = target


class ConfigurationError(BoardingHouseError):
    """Raised when configuration is invalid."""

    error_code = "configuration_error"


class AuthenticationError(BoardingHouseError):
    """Raised when authentication fails."""

    error_code = "unauthenticated"


class AuthorizationError(BoardingHouseError):
    """Raised when an authenticated user lacks permissions."""

    error_code = "forbidden"
