"""
Employee directory endpoints.

- GET operations require any authenticated user.
- POST / PUT / DELETE require an admin or HR account.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.v1.deps import get_current_active_user, get_db, require_admin
from hrms.models.employee import Employee
from hrms.models.user import User
from hrms.schemas.employee import (DeleteResponse, EmployeeCreate,
                                   EmployeeRead, EmployeeUpdate)

router = APIRouter(tags=["employees"])
logger = logging.getLogger(__name__)


def _like(term: str) -> str:
    # Escape LIKE metacharacters so a search term cannot act as a wildcard
    safe = term.replace("%", r"\%").replace("_", r"\_")
    return f"%{safe}%"


async def get_employee_or_404(db: AsyncSession, employee_id: int) -> Employee:
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    skip: int = 0,
    limit: int = Query(default=50, le=500),
    project: list[str] | None = Query(default=None),
    designation: str | None = None,
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Employee]:
    """List active employees, filtered by project(s), designation and name/code search."""
    query = select(Employee).where(Employee.is_active.is_(True))
    if project:
        query = query.where(Employee.project_name.in_(project))
    if designation:
        query = query.where(Employee.designation == designation)
    if search:
        pattern = _like(search)
        query = query.where(
            or_(
                Employee.full_name.ilike(pattern, escape="\\"),
                Employee.employee_code.ilike(pattern, escape="\\"),
            )
        )
    query = query.order_by(Employee.full_name).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("/employees", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> Employee:
    existing = await db.execute(
        select(Employee).where(Employee.employee_code == body.employee_code)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=400,
            detail=f"Employee code '{body.employee_code}' already registered",
        )

    employee = Employee(**body.model_dump())
    db.add(employee)
    await db.commit()
    await db.refresh(employee)
    logger.info("Created employee %s (%s)", employee.full_name, employee.employee_code)
    return employee


@router.get("/employees/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> Employee:
    emp = await get_employee_or_404(db, employee_id)
    if not emp.is_active:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


@router.put("/employees/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> Employee:
    emp = await get_employee_or_404(db, employee_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(emp, field, value)

    await db.commit()
    await db.refresh(emp)
    logger.info("Updated employee %d", employee_id)
    return emp


@router.delete("/employees/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DeleteResponse:
    """Deactivate an employee. Punch and leave history is kept."""
    emp = await get_employee_or_404(db, employee_id)
    emp.is_active = False
    await db.commit()
    logger.info("Deactivated employee %d (%s)", employee_id, emp.full_name)
    return DeleteResponse(success=True, message=f"Employee '{emp.full_name}' deactivated")
