"""Engine and session factory bound to ``DATABASE_URL``."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from boardinghouse.core.config import get_config

logger = logging.getLogger(__name__)

config = get_config()


def _engine_options(database_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": config.DEBUG}
    if database_url.startswith("sqlite"):
        # Request handlers run in a threadpool.
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(pool_pre_ping=True, pool_recycle=1800, pool_size=5, max_overflow=10)
    return options


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def database_backend() -> str:
    """Dialect name of the bound engine, e.g. ``sqlite`` or ``postgresql``."""
    return engine.url.get_backend_name()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_all() -> None:
    """Create missing tables; used for sqlite runs that skip Alembic."""
    from boardinghouse.models import Base

    Base.metadata.create_all(bind=engine)


def verify_database_connection() -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("database.unreachable", extra={"event": "database.unreachable"})
        return False
    return True
