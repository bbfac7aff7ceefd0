"""Root conftest: in-memory SQLite engine and the users schema."""

from __future__ import annotations

import pytest
from sqlalchemy import Connection, create_engine, text
from sqlalchemy.engine import Engine

from userbase.models.user import UserCreate, UserUpdate
from userbase.settings import settings

# Matches Alembic head: 3f1c9a7d2b40 (create users)
SCHEMA_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name VARCHAR(100) NOT NULL,
    username VARCHAR(50) NOT NULL UNIQUE,
    email VARCHAR(255) NOT NULL UNIQUE,
    password_hash VARCHAR(255) NOT NULL,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);
"""


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Lowest bcrypt work factor keeps hashing cheap in tests."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture()
def db_engine() -> Engine:
    return create_engine("sqlite:///:memory:")


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _create_payload(**overrides) -> UserCreate:
    defaults = dict(name="Ann", username="ann1", email="ann@example.com", password="secret")
    defaults.update(overrides)
    return UserCreate(**defaults)


def _update_payload(**overrides) -> UserUpdate:
    defaults = dict(name="Ann", username="ann1", email="ann@example.com")
    defaults.update(overrides)
    return UserUpdate(**defaults)


@pytest.fixture()
def create_payload():
    return _create_payload


@pytest.fixture()
def update_payload():
    return _update_payload
