"""
Government holiday calendar CRUD.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.v1.deps import get_current_active_user, get_db, require_admin
from hrms.models.holiday import Holiday
from hrms.models.user import User
from hrms.schemas.employee import DeleteResponse
from hrms.schemas.leave import HolidayCreate, HolidayRead
from hrms.services.holidays import DEFAULT_GOVERNMENT_HOLIDAYS

router = APIRouter(prefix="/holidays", tags=["holidays"])
logger = logging.getLogger(__name__)


async def holiday_dates(db: AsyncSession) -> set[str]:
    result = await db.execute(select(Holiday.date))
    return set(result.scalars().all())


async def seed_default_holidays(db: AsyncSession) -> int:
    """Insert the built-in government holidays that are not yet present."""
    existing = await holiday_dates(db)
    missing = [
        Holiday(date=day, description=description)
        for day, description in DEFAULT_GOVERNMENT_HOLIDAYS
        if day not in existing
    ]
    db.add_all(missing)
    await db.commit()
    return len(missing)


@router.get("", response_model=list[HolidayRead])
async def list_holidays(
    year: int | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Holiday]:
    stmt = select(Holiday).order_by(Holiday.date)
    if year is not None:
        stmt = stmt.where(Holiday.date.startswith(f"{year:04d}-"))
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("", response_model=HolidayRead, status_code=201)
async def create_holiday(
    body: HolidayCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> Holiday:
    existing = await db.execute(select(Holiday).where(Holiday.date == body.date))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail=f"Holiday on {body.date} already exists")

    holiday = Holiday(date=body.date, description=body.description)
    db.add(holiday)
    await db.commit()
    await db.refresh(holiday)
    logger.info("Added holiday %s (%s)", holiday.date, holiday.description)
    return holiday


@router.delete("/{holiday_id}", response_model=DeleteResponse)
async def delete_holiday(
    holiday_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DeleteResponse:
    result = await db.execute(select(Holiday).where(Holiday.id == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise HTTPException(status_code=404, detail="Holiday not found")

    await db.delete(holiday)
    await db.commit()
    logger.warning("Removed holiday %s (%s)", holiday.date, holiday.description)
    return DeleteResponse(success=True, message=f"Holiday on {holiday.date} removed")
