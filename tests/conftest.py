"""
Shared test fixtures for the HRMS attendance service.

Each test gets its own in-memory SQLite database (aiosqlite) wired into the
app through a dependency override; auth guards are overridden with an admin.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SEED_DEFAULT_HOLIDAYS"] = "false"
os.environ["HOLIDAY_UTC_OFFSET"] = "+00:00"

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,  # noqa: E402
                                    create_async_engine)
from sqlalchemy.pool import StaticPool  # noqa: E402

from hrms.api.v1.deps import get_current_active_user, get_db, require_admin  # noqa: E402
from hrms.db.base import Base  # noqa: E402
from hrms.main import app  # noqa: E402
from hrms.models.user import User  # noqa: E402


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh schema on a private in-memory database for every test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app and the test database."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Raw session for seeding or inspecting rows directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def create_employee(async_client: AsyncClient):
    """Factory: register an employee through the API and return its JSON."""

    async def _create(code: str, name: str = "Test Employee", project: str | None = "Facility", **extra):
        payload = {"employee_code": code, "full_name": name, "project_name": project, **extra}
        resp = await async_client.post("/api/v1/employees", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


# ── Auth Overrides ──────────────────────────────────────────────────
async def _override_get_current_active_user():
    return User(id=1, email="hr@example.com", is_active=True, role="admin")


async def _override_require_admin():
    return User(id=1, email="hr@example.com", is_active=True, role="admin")


app.dependency_overrides[get_current_active_user] = _override_get_current_active_user
app.dependency_overrides[require_admin] = _override_require_admin
