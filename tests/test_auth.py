"""Tests for login, token refresh and the real auth guards."""

import pytest
from httpx import AsyncClient

from hrms.api.v1.deps import get_current_active_user, require_admin
from hrms.core.security import (ACCESS, REFRESH, create_access_token,
                                decode_token, get_password_hash)
from hrms.main import app
from hrms.models.user import User


@pytest.fixture
async def hr_user(db_session) -> User:
    user = User(
        email="hr.lead@example.com",
        hashed_password=get_password_hash("s3cret-pass"),
        full_name="HR Lead",
        role="hr",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def real_auth():
    """Temporarily remove the admin overrides installed by conftest."""
    saved = {
        dep: app.dependency_overrides.pop(dep)
        for dep in (get_current_active_user, require_admin)
        if dep in app.dependency_overrides
    }
    yield
    app.dependency_overrides.update(saved)


def test_token_types_are_not_interchangeable():
    token = create_access_token(7)
    assert decode_token(token, ACCESS)["sub"] == "7"
    assert decode_token(token, REFRESH) is None
    assert decode_token("not-a-jwt", ACCESS) is None


@pytest.mark.asyncio
async def test_login_and_refresh(async_client: AsyncClient, hr_user: User):
    resp = await async_client.post(
        "/api/v1/auth/login",
        data={"username": "HR.Lead@example.com", "password": "s3cret-pass"},
    )
    assert resp.status_code == 200
    tokens = resp.json()
    assert tokens["token_type"] == "bearer"
    assert decode_token(tokens["access_token"], ACCESS)["sub"] == str(hr_user.id)

    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert resp.status_code == 200
    assert resp.json()["access_token"]

    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_login_wrong_password(async_client: AsyncClient, hr_user: User):
    resp = await async_client.post(
        "/api/v1/auth/login",
        data={"username": hr_user.email, "password": "wrong-pass"},
    )
    assert resp.status_code == 401
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_protected_routes_need_a_token(async_client: AsyncClient, hr_user: User, real_auth):
    resp = await async_client.get("/api/v1/employees")
    assert resp.status_code == 401

    headers = {"Authorization": f"Bearer {create_access_token(hr_user.id)}"}
    resp = await async_client.get("/api/v1/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "hr.lead@example.com"

    resp = await async_client.post(
        "/api/v1/holidays",
        json={"date": "2025-08-15", "description": "Independence Day"},
        headers=headers,
    )
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_non_admin_cannot_write(async_client: AsyncClient, db_session, real_auth):
    user = User(email="viewer@example.com", hashed_password=get_password_hash("viewer-pass"), role="employee")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    headers = {"Authorization": f"Bearer {create_access_token(user.id)}"}
    resp = await async_client.post(
        "/api/v1/employees", json={"employee_code": "X-001", "full_name": "X"}, headers=headers
    )
    assert resp.status_code == 403
    assert (await async_client.get("/api/v1/employees", headers=headers)).status_code == 200
