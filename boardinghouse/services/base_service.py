"""Common plumbing for services that work on one SQLAlchemy session."""

from __future__ import annotations

from datetime import date, datetime
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from boardinghouse.core.config import Config, get_config
from boardinghouse.core.exceptions import ConflictError, NotFoundError
from boardinghouse.database import db as database
from boardinghouse.models.base import utcnow

ModelT = TypeVar("ModelT")

_STALE_MESSAGE = "Record was modified by another request; reload and retry."
_INTEGRITY_MESSAGE = "Write violates a uniqueness or reference constraint."


class BaseService:
    """Services either receive the request's session or open their own.

    A service that opened its own session closes it when used as a context
    manager; a borrowed session is left to its owner.
    """

    def __init__(self, db: Session | None = None, config: Config | None = None) -> None:
        self._owns_session = db is None
        self.db = db if db is not None else database.SessionLocal()
        self.config = config or get_config()

    @staticmethod
    def _now(now: datetime | None = None) -> datetime:
        return now or utcnow()

    @staticmethod
    def _today(now: datetime | date | None = None) -> date:
        if isinstance(now, datetime):
            return now.date()
        return now or utcnow().date()

    def _get_or_raise(self, model: type[ModelT], entity_id: int, label: str) -> ModelT:
        entity = self.db.get(model, entity_id)
        if entity is None:
            raise NotFoundError(f"{label} with ID {entity_id} does not exist")
        return entity

    def commit(self) -> None:
        """Commit, rolling back on any failure.

        Version-counter mismatches and constraint violations are re-raised as
        :class:`ConflictError`.
        """
        try:
            self.db.commit()
        except (StaleDataError, IntegrityError) as exc:
            self.db.rollback()
            message = _STALE_MESSAGE if isinstance(exc, StaleDataError) else _INTEGRITY_MESSAGE
            raise ConflictError(message) from exc
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            self.rollback()
        if self._owns_session:
            self.db.close()
