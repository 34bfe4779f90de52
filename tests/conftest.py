"""
Shared test fixtures.
Tests run against an in-memory SQLite database so the real models, constraints
and repositories are exercised without a PostgreSQL server.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from bus_service.core.config import Settings
from bus_service.db.session import Database
from bus_service.main import create_app

BUS_PAYLOAD = {"plate_number": "ABC-123", "model": "Volvo 9700", "capacity": 45}
STAFF_PAYLOAD = {
    "name": "Jane Doe",
    "email": "jane.doe@example.com",
    "phone": "+15550100",
    "position": "driver",
    "license_no": "DL-0001",
}


def as_utc(value: datetime | str) -> datetime:
    """SQLite drops tzinfo on read; stored values are always UTC."""

    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def database(engine: Engine) -> Database:
    database = Database(engine)
    database.init_schema()
    return database


@pytest.fixture
def session(database: Database) -> Iterator[Session]:
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(environ={"DATABASE_URL": "sqlite://"})


@pytest.fixture
def client(settings: Settings, database: Database) -> Iterator[TestClient]:
    app = create_app(settings, database=database)
    with TestClient(app) as test_client:
        yield test_client
