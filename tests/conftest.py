# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-crew-deck")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from crew_deck.core.security import create_access_token
from crew_deck.db.session import Base
from crew_deck.db.session import get_db as app_get_session
from crew_deck.main import app as fastapi_app
from crew_deck.models import Membership, Station
from crew_deck.services import roles, stations

TEST_DB_URL = "sqlite://"

CAPTAIN = "alice"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Return a factory building bearer headers for a principal."""

    def _headers(principal: str) -> dict[str, str]:
        token = create_access_token(principal)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def station(db_session: Session) -> Station:
    """A station captained by ``alice``."""
    return roles.create_station(db_session, "Test Station", "A station for tests", CAPTAIN)


@pytest.fixture()
def add_member(db_session: Session, station: Station) -> Callable[..., Membership]:
    """Return a helper that joins a principal and optionally gives them a role."""

    def _add(principal: str, role: str | None = None) -> Membership:
        membership = stations.join_station(db_session, station.id, principal)
        if role is not None and role != "crew":
            membership = roles.assign_role(db_session, station.id, CAPTAIN, principal, role)
        return membership

    return _add
