# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from devtrack.database import Base, get_db
from devtrack.main import app
from devtrack.models import task, user  # noqa: F401  (register tables)
from devtrack.utils import security

from .fakes import InMemoryTaskRepository, InMemoryUserRepository

# Minimum bcrypt cost for tests.
security.pwd_context.update(bcrypt__rounds=4)


@pytest.fixture()
async def engine(tmp_path: Path):
    """Fresh SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'devtrack-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def client(engine):
    """In-process API client with get_db pointed at the test database."""
    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)

    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tasks() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


async def signup(client: AsyncClient, name: str = "Ana", email: str = "ana@x.com", password: str = "pw123"):
    """Register a user and return ``(user_json, auth_headers)``."""
    response = await client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    data = response.json()
    return data["user"], {"Authorization": f"Bearer {data['token']}"}
