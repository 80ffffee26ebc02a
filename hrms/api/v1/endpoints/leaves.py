"""
Leave requests: apply, review and per-employee history.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.v1.deps import get_current_active_user, get_db, require_admin
from hrms.api.v1.endpoints.attendance import parse_month
from hrms.api.v1.endpoints.employees import get_employee_or_404
from hrms.models.leave import LeaveRequest
from hrms.models.user import User
from hrms.schemas.leave import (LEAVE_STATUSES, LeaveCreate,
                                LeaveHistoryResponse, LeaveRead,
                                LeaveStatusUpdate)
from hrms.services.holidays import days_in_month

router = APIRouter(prefix="/leaves", tags=["leaves"])
logger = logging.getLogger(__name__)


@router.post("", response_model=LeaveRead, status_code=201)
async def apply_leave(
    body: LeaveCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> LeaveRequest:
    employee = await get_employee_or_404(db, body.employee_id)
    if not employee.is_active:
        raise HTTPException(status_code=403, detail="Employee account is deactivated")

    leave = LeaveRequest(
        employee_id=employee.id,
        leave_type=body.leave_type,
        start_date=body.start_date.isoformat(),
        end_date=body.end_date.isoformat(),
        number_of_days=float(body.number_of_days),
        status="Pending",
        reason=body.reason,
    )
    db.add(leave)
    await db.commit()
    await db.refresh(leave)
    logger.info(
        "Leave %s applied for employee %d (%s to %s)",
        leave.leave_type, employee.id, leave.start_date, leave.end_date,
    )
    return leave


@router.get("", response_model=list[LeaveRead])
async def list_leaves(
    employee_id: int | None = Query(default=None),
    status: str | None = Query(default=None),
    month: str | None = Query(default=None, description="YYYY-MM, matches leaves overlapping the month"),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[LeaveRequest]:
    stmt = select(LeaveRequest).order_by(LeaveRequest.start_date.desc(), LeaveRequest.id)
    if employee_id is not None:
        stmt = stmt.where(LeaveRequest.employee_id == employee_id)
    if status:
        if status not in LEAVE_STATUSES:
            raise HTTPException(status_code=400, detail=f"Unknown status: {status}")
        stmt = stmt.where(LeaveRequest.status == status)
    if month:
        year, mon = parse_month(month)
        stmt = stmt.where(
            LeaveRequest.start_date <= f"{year:04d}-{mon:02d}-{days_in_month(year, mon):02d}",
            LeaveRequest.end_date >= f"{year:04d}-{mon:02d}-01",
        )
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.put("/{leave_id}/status", response_model=LeaveRead)
async def decide_leave(
    leave_id: int,
    body: LeaveStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> LeaveRequest:
    result = await db.execute(select(LeaveRequest).where(LeaveRequest.id == leave_id))
    leave = result.scalar_one_or_none()
    if leave is None:
        raise HTTPException(status_code=404, detail="Leave request not found")

    leave.status = body.status
    leave.decided_by = admin.id
    await db.commit()
    await db.refresh(leave)
    logger.info("Leave %d marked %s by user %d", leave_id, body.status, admin.id)
    return leave


@router.get("/history/{employee_id}", response_model=LeaveHistoryResponse)
async def leave_history(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> LeaveHistoryResponse:
    employee = await get_employee_or_404(db, employee_id)
    result = await db.execute(
        select(LeaveRequest)
        .where(LeaveRequest.employee_id == employee_id)
        .order_by(LeaveRequest.applied_on.desc(), LeaveRequest.id.desc())
    )
    leaves = list(result.scalars().all())

    by_status = Counter(leave.status for leave in leaves)
    days_by_type: dict[str, float] = defaultdict(float)
    for leave in leaves:
        if leave.status == "Approved":
            days_by_type[leave.leave_type] += leave.number_of_days

    return LeaveHistoryResponse(
        employee_id=employee.id,
        employee_name=employee.full_name,
        total_leaves=len(leaves),
        pending=by_status["Pending"],
        approved=by_status["Approved"],
        rejected=by_status["Rejected"],
        days_by_type=dict(days_by_type),
        leave_history=[LeaveRead.model_validate(leave) for leave in leaves],
    )
