"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (the PostgreSQL advisory lock and cycle trigger are not exercised here)
    - Seed helpers go through the API, not the ORM: they exercise the same
      write path the product uses
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from teamboard.db.base import Base
from teamboard.infrastructure.database import get_db, DatabaseSessionManager
import teamboard.infrastructure.database as db_module
import teamboard.models  # noqa: F401
from teamboard.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def create_team(client):
    """POST /teams and return the response body."""
    async def _create(name: str, parent_id: str | None = None, **fields) -> dict:
        res = await client.post(
            "/api/v1/teams", json={"name": name, "parent_id": parent_id, **fields},
        )
        assert res.status_code == 201, res.text
        return res.json()
    return _create


@pytest.fixture
def create_user(client):
    """POST /users and return the response body."""
    async def _create(name: str, email: str | None = None) -> dict:
        res = await client.post(
            "/api/v1/users",
            json={"name": name, "email": email or f"{name.lower()}@example.com"},
        )
        assert res.status_code == 201, res.text
        return res.json()
    return _create


@pytest.fixture
def add_member(client):
    """POST /teams/{id}/members and return the response body."""
    async def _add(team_id: str, user_id: str, **fields) -> dict:
        res = await client.post(
            f"/api/v1/teams/{team_id}/members", json={"user_id": user_id, **fields},
        )
        assert res.status_code == 201, res.text
        return res.json()
    return _add
