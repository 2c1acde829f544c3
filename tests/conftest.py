from __future__ import annotations

import os
from datetime import date, datetime

# Bind the module-level engine to a throwaway database before the package is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from boardinghouse.auth.jwt import create_token_pair
from boardinghouse.auth.passwords import hash_password
from boardinghouse.core.config import get_config
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.main import create_app
from boardinghouse.models import Base, Room, Tenant, User, UserRole


def _build_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def session_factory():
    engine = _build_engine()
    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_room(session):
    counter = {"value": 0}

    def _make_room(number: str | None = None, base_price: int = 3_000_000, created_at: datetime | None = None, **extra):
        counter["value"] += 1
        room = Room(
            number=number or f"P{100 + counter['value']}",
            floor=extra.pop("floor", 1),
            area=extra.pop("area", 20.0),
            capacity=extra.pop("capacity", 2),
            base_price=base_price,
            created_at=created_at or datetime(2020, 1, 1),
            **extra,
        )
        session.add(room)
        session.commit()
        return room

    return _make_room


@pytest.fixture
def make_tenant(session):
    counter = {"value": 0}

    def _make_tenant(full_name: str = "Nguyen Van A"):
        counter["value"] += 1
        tenant = Tenant(
            full_name=full_name,
            phone=f"09000000{counter['value']:02d}",
            id_card=f"0010900000{counter['value']:02d}",
            date_of_birth=date(1995, 5, 20),
        )
        session.add(tenant)
        session.commit()
        return tenant

    return _make_tenant


def _headers_for(user_id: int, username: str, role: UserRole) -> dict[str, str]:
    cfg = get_config()
    tokens = create_token_pair(
        user_id=user_id,
        username=username,
        role=role.value,
        secret=cfg.JWT_SECRET,
        permissions_version=cfg.JWT_PERMISSIONS_VERSION,
    )
    return {"Authorization": f"Bearer {tokens.access_token}"}


@pytest.fixture
def client(session_factory):
    app = create_app()

    def _override_session():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db_session] = _override_session
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return _headers_for(1, "admin", UserRole.ADMIN)


@pytest.fixture
def manager_headers():
    return _headers_for(2, "manager", UserRole.MANAGER)


@pytest.fixture
def stored_user(session):
    user = User(
        username="manager",
        full_name="Front Desk",
        hashed_password=hash_password("s3cret-pass"),
        role=UserRole.MANAGER,
    )
    session.add(user)
    session.commit()
    return user
