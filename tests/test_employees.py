"""Tests for employee CRUD endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_employee(async_client: AsyncClient):
    """POST /employees should create a new employee."""
    resp = await async_client.post("/api/v1/employees", json={
        "employee_code": "EMP-001",
        "full_name": "Bob Jones",
        "designation": "Supervisor",
        "project_name": "Facility",
        "email": "bob@example.com",
    })
    assert resp.status_code == 201
    data = resp.json()
    assert data["full_name"] == "Bob Jones"
    assert data["employee_code"] == "EMP-001"
    assert data["is_active"] is True
    assert data["id"] is not None


@pytest.mark.asyncio
async def test_create_duplicate_code_rejected(async_client: AsyncClient):
    """Creating two employees with the same code should fail."""
    await async_client.post("/api/v1/employees", json={"full_name": "Emp1", "employee_code": "DUP-001"})
    resp = await async_client.post("/api/v1/employees", json={"full_name": "Emp2", "employee_code": "DUP-001"})
    assert resp.status_code == 400
    body = resp.json()
    assert "already registered" in body["detail"]
    assert body["success"] is False


@pytest.mark.asyncio
async def test_create_employee_rejects_bad_code(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/employees", json={"full_name": "X", "employee_code": "has space"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_employees_pagination(async_client: AsyncClient, create_employee):
    """GET /employees with skip/limit should paginate."""
    for i in range(5):
        await create_employee(f"PAGE-{i:03d}", f"P{i}")
    resp = await async_client.get("/api/v1/employees?skip=2&limit=2")
    assert resp.status_code == 200
    assert len(resp.json()) == 2


@pytest.mark.asyncio
async def test_list_employees_filters(async_client: AsyncClient, create_employee):
    await create_employee("OPS-001", "Asha Rao", project="Exozen - Ops", designation="Technician")
    await create_employee("FAC-001", "Ravi Kumar", project="Facility", designation="Technician")
    await create_employee("FAC-002", "Meena Iyer", project="Facility", designation="Supervisor")

    resp = await async_client.get("/api/v1/employees", params={"project": "Facility"})
    assert {e["employee_code"] for e in resp.json()} == {"FAC-001", "FAC-002"}

    resp = await async_client.get("/api/v1/employees", params={"designation": "Technician"})
    assert {e["employee_code"] for e in resp.json()} == {"OPS-001", "FAC-001"}

    resp = await async_client.get("/api/v1/employees", params={"search": "ravi"})
    assert [e["employee_code"] for e in resp.json()] == ["FAC-001"]

    resp = await async_client.get("/api/v1/employees", params={"search": "OPS-"})
    assert [e["employee_code"] for e in resp.json()] == ["OPS-001"]


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(async_client: AsyncClient, create_employee):
    await create_employee("WILD-001", "Plain Name")
    resp = await async_client.get("/api/v1/employees", params={"search": "%"})
    assert resp.json() == []


@pytest.mark.asyncio
async def test_get_employee_not_found(async_client: AsyncClient):
    """Requesting a non-existent employee should return 404."""
    resp = await async_client.get("/api/v1/employees/9999")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_employee(async_client: AsyncClient, create_employee):
    """PUT /employees/{id} should update employee details."""
    emp = await create_employee("UPD-001", "Old Name")
    resp = await async_client.put(
        f"/api/v1/employees/{emp['id']}",
        json={"full_name": "New Name", "project_name": "Exozen - Ops"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["full_name"] == "New Name"
    assert data["project_name"] == "Exozen - Ops"


@pytest.mark.asyncio
async def test_delete_employee_deactivates(async_client: AsyncClient, create_employee):
    """DELETE /employees/{id} should soft-delete."""
    emp = await create_employee("DEL-001", "To Delete")
    resp = await async_client.delete(f"/api/v1/employees/{emp['id']}")
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    assert (await async_client.get(f"/api/v1/employees/{emp['id']}")).status_code == 404
    listed = await async_client.get("/api/v1/employees")
    assert all(e["employee_code"] != "DEL-001" for e in listed.json())
