"""Tests for leave requests and the holiday calendar endpoints."""

import pytest
from httpx import AsyncClient


async def _apply(client: AsyncClient, employee_id: int, start: str, end: str, leave_type: str = "EL"):
    resp = await client.post("/api/v1/leaves", json={
        "employee_id": employee_id,
        "leave_type": leave_type,
        "start_date": start,
        "end_date": end,
        "reason": "Family function",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_apply_leave_is_pending(async_client: AsyncClient, create_employee):
    emp = await create_employee("LV-001")
    leave = await _apply(async_client, emp["id"], "2025-05-10", "2025-05-12")
    assert leave["status"] == "Pending"
    assert leave["number_of_days"] == 3
    assert leave["start_date"] == "2025-05-10"


@pytest.mark.asyncio
async def test_apply_leave_rejects_reversed_range(async_client: AsyncClient, create_employee):
    emp = await create_employee("LV-002")
    resp = await async_client.post("/api/v1/leaves", json={
        "employee_id": emp["id"], "leave_type": "SL",
        "start_date": "2025-05-12", "end_date": "2025-05-10",
    })
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_apply_leave_unknown_employee(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/leaves", json={
        "employee_id": 4242, "leave_type": "SL",
        "start_date": "2025-05-10", "end_date": "2025-05-10",
    })
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_decide_leave(async_client: AsyncClient, create_employee):
    emp = await create_employee("LV-003")
    leave = await _apply(async_client, emp["id"], "2025-05-10", "2025-05-12")

    resp = await async_client.put(f"/api/v1/leaves/{leave['id']}/status", json={"status": "Approved"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "Approved"

    resp = await async_client.put(f"/api/v1/leaves/{leave['id']}/status", json={"status": "Maybe"})
    assert resp.status_code == 422

    resp = await async_client.put("/api/v1/leaves/999/status", json={"status": "Rejected"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_leaves_filters(async_client: AsyncClient, create_employee):
    emp = await create_employee("LV-004")
    may = await _apply(async_client, emp["id"], "2025-04-29", "2025-05-02")
    await _apply(async_client, emp["id"], "2025-06-10", "2025-06-10", "CL")
    await async_client.put(f"/api/v1/leaves/{may['id']}/status", json={"status": "Approved"})

    resp = await async_client.get("/api/v1/leaves", params={"employee_id": emp["id"], "month": "2025-05"})
    assert [row["id"] for row in resp.json()] == [may["id"]]

    resp = await async_client.get("/api/v1/leaves", params={"status": "Pending"})
    assert [row["leave_type"] for row in resp.json()] == ["CL"]

    resp = await async_client.get("/api/v1/leaves", params={"status": "Unknown"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_leaves_month_is_validated(async_client: AsyncClient, create_employee):
    emp = await create_employee("LV-006")
    leave = await _apply(async_client, emp["id"], "2025-05-10", "2025-05-12")

    resp = await async_client.get("/api/v1/leaves", params={"month": "2025-5"})
    assert resp.status_code == 200
    assert [row["id"] for row in resp.json()] == [leave["id"]]

    for bad in ("2025-13", "May-2025", "2025"):
        resp = await async_client.get("/api/v1/leaves", params={"month": bad})
        assert resp.status_code == 400, bad
        assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_leave_history(async_client: AsyncClient, create_employee):
    emp = await create_employee("LV-005", "History Holder")
    a = await _apply(async_client, emp["id"], "2025-05-10", "2025-05-12", "EL")
    b = await _apply(async_client, emp["id"], "2025-05-20", "2025-05-20", "SL")
    await _apply(async_client, emp["id"], "2025-05-26", "2025-05-26", "CL")
    await async_client.put(f"/api/v1/leaves/{a['id']}/status", json={"status": "Approved"})
    await async_client.put(f"/api/v1/leaves/{b['id']}/status", json={"status": "Rejected"})

    resp = await async_client.get(f"/api/v1/leaves/history/{emp['id']}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["employee_name"] == "History Holder"
    assert data["total_leaves"] == 3
    assert (data["pending"], data["approved"], data["rejected"]) == (1, 1, 1)
    assert data["days_by_type"] == {"EL": 3.0}
    assert len(data["leave_history"]) == 3


# ── Holidays ────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_holiday_crud(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/holidays", json={"date": "2025-08-15", "description": "Independence Day"})
    assert resp.status_code == 201
    holiday_id = resp.json()["id"]

    resp = await async_client.post("/api/v1/holidays", json={"date": "2025-08-15", "description": "Again"})
    assert resp.status_code == 400

    await async_client.post("/api/v1/holidays", json={"date": "2026-01-26", "description": "Republic Day"})
    resp = await async_client.get("/api/v1/holidays", params={"year": 2025})
    assert [h["date"] for h in resp.json()] == ["2025-08-15"]

    resp = await async_client.delete(f"/api/v1/holidays/{holiday_id}")
    assert resp.status_code == 200
    assert (await async_client.delete(f"/api/v1/holidays/{holiday_id}")).status_code == 404


@pytest.mark.asyncio
async def test_holiday_rejects_malformed_date(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/holidays", json={"date": "15/08/2025", "description": "Bad"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_holiday_rejects_overlong_description(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/holidays", json={"date": "2025-08-15", "description": "x" * 201})
    assert resp.status_code == 422
    resp = await async_client.post("/api/v1/holidays", json={"date": "2025-08-15", "description": "x" * 200})
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_seed_default_holidays_is_idempotent(db_session):
    from hrms.api.v1.endpoints.holidays import holiday_dates, seed_default_holidays
    from hrms.services.holidays import DEFAULT_GOVERNMENT_HOLIDAYS

    first = await seed_default_holidays(db_session)
    second = await seed_default_holidays(db_session)
    assert first == len(DEFAULT_GOVERNMENT_HOLIDAYS)
    assert second == 0
    assert "2025-08-15" in await holiday_dates(db_session)
