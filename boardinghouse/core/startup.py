"""Process bootstrap: logging, configuration checks and local schema."""

from __future__ import annotations

import logging

from boardinghouse.core.config import get_config
from boardinghouse.core.logging_config import configure_logging
from boardinghouse.database.db import create_all, database_backend, verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Check the database is reachable; fatal only when the config demands it."""
    config = get_config()
    backend = database_backend()

    if not verify_database_connection():
        if config.DB_CONNECTIVITY_REQUIRED:
            raise RuntimeError("Database connectivity check failed.")
        logger.warning("startup.database_unreachable", extra={"event": "startup.database_unreachable"})

    if config.is_production and backend == "sqlite":
        logger.warning("startup.sqlite_in_production", extra={"event": "startup.sqlite_in_production"})

    logger.info(
        "startup.ready",
        extra={
            "event": "startup.ready",
            "env": config.ENV,
            "database_backend": backend,
            "contract_reactivation": config.ALLOW_CONTRACT_REACTIVATION,
        },
    )


def bootstrap() -> None:
    configure_logging()
    validate_startup_config()
    # PostgreSQL deployments are migrated with Alembic instead.
    if database_backend() == "sqlite":
        create_all()
