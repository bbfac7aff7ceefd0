"""Web test fixtures: TestClient with a shared in-memory SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from tests.conftest import SCHEMA_DDL


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with a shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()

    return engine


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up the in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def new_user():
    def _new_user(**overrides) -> dict:
        body = {"name": "Ann", "username": "ann1", "email": "ann@example.com", "password": "secret"}
        body.update(overrides)
        return body

    return _new_user
