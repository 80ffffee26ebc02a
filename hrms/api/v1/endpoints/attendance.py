"""
Punch-in / punch-out and daily punch records.

One row per employee per office-local day. The day's attendance code is
never stored here; reports derive it from these rows.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.v1.deps import get_current_active_user, get_db, require_admin
from hrms.api.v1.endpoints.employees import get_employee_or_404
from hrms.core.config import settings
from hrms.core.exceptions import InvalidPeriodError
from hrms.models.employee import Employee, PunchRecord
from hrms.models.user import User
from hrms.schemas.employee import (PunchRecordRead, PunchRecordUpsert,
                                   PunchRequest)
from hrms.services.aggregation import hours_worked
from hrms.services.holidays import days_in_month, local_today

router = APIRouter(prefix="/attendance", tags=["attendance"])
logger = logging.getLogger(__name__)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Treat naive timestamps (SQLite) as UTC."""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_read(record: PunchRecord) -> PunchRecordRead:
    punch_in = ensure_utc(record.punch_in_time)
    punch_out = ensure_utc(record.punch_out_time)
    return PunchRecordRead(
        id=record.id,
        employee_id=record.employee_id,
        date=record.date,
        status=record.status,
        punch_in_time=punch_in,
        punch_out_time=punch_out,
        project_name=record.project_name,
        remarks=record.remarks,
        hours_worked=hours_worked(punch_in, punch_out),
    )


def parse_month(month: str) -> tuple[int, int]:
    """``YYYY-MM`` -> (year, month)."""
    try:
        year_str, month_str = month.split("-")
        year, mon = int(year_str), int(month_str)
    except ValueError:
        raise InvalidPeriodError(f"Month must be YYYY-MM, got {month!r}") from None
    days_in_month(year, mon)
    return year, mon


async def _active_employee_by_code(db: AsyncSession, code: str) -> Employee:
    result = await db.execute(select(Employee).where(Employee.employee_code == code))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    if not employee.is_active:
        raise HTTPException(status_code=403, detail="Employee account is deactivated")
    return employee


async def _record_for(db: AsyncSession, employee_id: int, day: str) -> PunchRecord | None:
    result = await db.execute(
        select(PunchRecord).where(PunchRecord.employee_id == employee_id, PunchRecord.date == day)
    )
    return result.scalar_one_or_none()


@router.post("/punch-in", response_model=PunchRecordRead)
async def punch_in(
    body: PunchRequest,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> PunchRecordRead:
    employee = await _active_employee_by_code(db, body.employee_code)
    today = local_today(settings.holiday_offset).isoformat()

    record = await _record_for(db, employee.id, today)
    if record is not None and record.punch_in_time:
        raise HTTPException(status_code=409, detail="Already punched in today")

    now = datetime.now(timezone.utc)
    if record is None:
        record = PunchRecord(employee_id=employee.id, date=today)
        db.add(record)
    record.status = "Present"
    record.punch_in_time = now
    record.project_name = body.project_name or employee.project_name

    await db.commit()
    await db.refresh(record)
    logger.info("Punch-in %s on %s", employee.employee_code, today)
    return to_read(record)


@router.post("/punch-out", response_model=PunchRecordRead)
async def punch_out(
    body: PunchRequest,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> PunchRecordRead:
    employee = await _active_employee_by_code(db, body.employee_code)
    today = local_today(settings.holiday_offset).isoformat()

    record = await _record_for(db, employee.id, today)
    if record is None or not record.punch_in_time:
        raise HTTPException(status_code=409, detail="No punch-in recorded today")
    if record.punch_out_time:
        raise HTTPException(status_code=409, detail="Already punched out today")

    record.punch_out_time = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(record)
    logger.info("Punch-out %s on %s", employee.employee_code, today)
    return to_read(record)


@router.put("/records", response_model=PunchRecordRead)
async def upsert_record(
    body: PunchRecordUpsert,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> PunchRecordRead:
    """Create or overwrite an employee-day (regularisation / backfill)."""
    employee = await get_employee_or_404(db, body.employee_id)
    day = body.date.isoformat()

    record = await _record_for(db, employee.id, day)
    if record is None:
        record = PunchRecord(employee_id=employee.id, date=day, project_name=employee.project_name)
        db.add(record)
    record.status = body.status
    record.punch_in_time = body.punch_in_time
    record.punch_out_time = body.punch_out_time
    record.remarks = body.remarks

    await db.commit()
    await db.refresh(record)
    logger.info("Regularised punch record for employee %d on %s", employee.id, day)
    return to_read(record)


@router.get("/{employee_id}", response_model=list[PunchRecordRead])
async def list_records(
    employee_id: int,
    month: str | None = Query(default=None, description="YYYY-MM"),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[PunchRecordRead]:
    await get_employee_or_404(db, employee_id)
    stmt = select(PunchRecord).where(PunchRecord.employee_id == employee_id)
    if month:
        year, mon = parse_month(month)
        stmt = stmt.where(PunchRecord.date.startswith(f"{year:04d}-{mon:02d}"))
    result = await db.execute(stmt.order_by(PunchRecord.date))
    return [to_read(r) for r in result.scalars().all()]
