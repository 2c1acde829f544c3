"""Environment-driven settings for the boarding house backend.

Values come from the process environment, optionally seeded from a ``.env``
file. Everything is read once per environment name and validated before use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from boardinghouse.core.exceptions import ConfigurationError

load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DATABASE_SCHEMES = ("sqlite", "postgresql", "postgresql+psycopg2")
PLACEHOLDER_SECRET = "change_me_jwt_secret"


def _str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    API_PREFIX: str
    # database
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    # auth
    JWT_SECRET: str
    JWT_ACCESS_TTL_MINUTES: int
    JWT_REFRESH_TTL_DAYS: int
    JWT_PERMISSIONS_VERSION: int
    # logging
    LOG_LEVEL: str
    LOG_FILE: str
    # business rules
    EXPIRING_SOON_DAYS: int
    ALLOW_CONTRACT_REACTIVATION: bool
    BILL_DUE_DAY: int
    DEFAULT_SERVICE_FEE: int
    EXPORT_COMPANY_NAME: str

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    def validate(self) -> Config:
        problems = []
        scheme = urlparse(self.DATABASE_URL).scheme
        if scheme not in DATABASE_SCHEMES:
            problems.append("DATABASE_URL must be a sqlite:// or postgresql:// URL")
        elif scheme.startswith("postgresql") and not urlparse(self.DATABASE_URL).hostname:
            problems.append("DATABASE_URL for PostgreSQL needs a hostname")
        if self.JWT_ACCESS_TTL_MINUTES < 1 or self.JWT_REFRESH_TTL_DAYS < 1:
            problems.append("JWT lifetimes must be positive")
        if self.LOG_LEVEL not in LOG_LEVELS:
            problems.append(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        if self.EXPIRING_SOON_DAYS < 1:
            problems.append("EXPIRING_SOON_DAYS must be at least 1")
        # February has 28 days.
        if not 1 <= self.BILL_DUE_DAY <= 28:
            problems.append("BILL_DUE_DAY must be between 1 and 28")
        if self.DEFAULT_SERVICE_FEE < 0:
            problems.append("DEFAULT_SERVICE_FEE must not be negative")
        if self.is_production and self.JWT_SECRET == PLACEHOLDER_SECRET:
            problems.append("JWT_SECRET must be set in production")
        if problems:
            raise ConfigurationError("; ".join(problems) + ".")
        return self


def load_config(env: str | None = None) -> Config:
    """Read and validate settings for ``env`` (defaults to ``$ENV``)."""
    env_name = (env or _str("ENV", "development")).lower()
    production = env_name == "production"
    return Config(
        APP_NAME="BoardingHouse",
        APP_VERSION=_str("APP_VERSION", "1.0.0"),
        ENV=env_name,
        DEBUG=_flag("DEBUG", False) and not production,
        API_PREFIX=_str("API_PREFIX", "/api/v1"),
        DATABASE_URL=_str("DATABASE_URL", "sqlite:///./boardinghouse.db"),
        DB_CONNECTIVITY_REQUIRED=_flag("DB_CONNECTIVITY_REQUIRED", production),
        JWT_SECRET=_str("JWT_SECRET", PLACEHOLDER_SECRET),
        JWT_ACCESS_TTL_MINUTES=_int("JWT_ACCESS_TTL_MINUTES", 60),
        JWT_REFRESH_TTL_DAYS=_int("JWT_REFRESH_TTL_DAYS", 14),
        JWT_PERMISSIONS_VERSION=_int("JWT_PERMISSIONS_VERSION", 1),
        LOG_LEVEL=_str("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=_str("LOG_FILE", ""),
        EXPIRING_SOON_DAYS=_int("EXPIRING_SOON_DAYS", 30),
        ALLOW_CONTRACT_REACTIVATION=_flag("ALLOW_CONTRACT_REACTIVATION", True),
        BILL_DUE_DAY=_int("BILL_DUE_DAY", 5),
        DEFAULT_SERVICE_FEE=_int("DEFAULT_SERVICE_FEE", 0),
        EXPORT_COMPANY_NAME=_str("EXPORT_COMPANY_NAME", "Boarding House"),
    ).validate()


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    return load_config(env)
