"""Shared fixtures: an in-memory SQLite database wired into the FastAPI app."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported so no Postgres driver is needed
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import create_tables, get_db
from app.main import app


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_db_client():
    """Client whose session fails on every commit and every query."""
    from unittest.mock import MagicMock
    from sqlalchemy.exc import OperationalError

    db = MagicMock()
    err = OperationalError("SELECT", {}, Exception("connection refused"))
    db.commit.side_effect = err
    db.execute.side_effect = err
    db.query.return_value.order_by.return_value.limit.return_value.all.side_effect = err
    db.query.return_value.filter.return_value.order_by.return_value.limit.return_value.all.side_effect = err
    db.query.return_value.order_by.return_value.all.side_effect = err
    db.query.return_value.filter.return_value.order_by.return_value.all.side_effect = err

    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app), db
    app.dependency_overrides.clear()
