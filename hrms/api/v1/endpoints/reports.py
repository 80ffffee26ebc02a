"""
Attendance reports.

Each report loads the month's employees, punch records, leave requests and
holidays in one query apiece, then classifies every employee-day in Python.
"""

from __future__ import annotations

import calendar
import csv
import io
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.v1.deps import get_current_active_user, get_db
from hrms.api.v1.endpoints.attendance import ensure_utc
from hrms.api.v1.endpoints.holidays import holiday_dates
from hrms.core.config import settings
from hrms.core.exceptions import InvalidPeriodError
from hrms.models.employee import Employee, PunchRecord
from hrms.models.leave import LeaveRequest
from hrms.models.user import User
from hrms.schemas.report import (AttendanceReportResponse, DayStatus,
                                 EmployeeMonthAttendance, EmployeeSummary,
                                 HealthResponse, HourlyReportResponse,
                                 HourlyRow, StatusCounts, StatusResponse,
                                 SummaryReportResponse)
from hrms.services.aggregation import (count_by_status, hours_worked,
                                       loss_of_pay, reconcile_comp_off,
                                       status_from_hours, summarize_month)
from hrms.services.classifier import (ClassifiedDay, DayPunch, LeaveInterval,
                                      classify_month)
from hrms.services.holidays import (days_in_month, local_today,
                                    saturdays_off_for, week_offs_in_month)

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)


@dataclass
class EmployeeMonth:
    employee: Employee
    days: list[ClassifiedDay]
    punches: dict[date, PunchRecord]
    saturdays_off: bool


def _as_of(value: date | None) -> date:
    return value or local_today(settings.holiday_offset)


async def _classify_period(
    db: AsyncSession,
    year: int,
    month: int,
    as_of: date,
    *,
    employee_id: int | None = None,
    projects: list[str] | None = None,
) -> list[EmployeeMonth]:
    n_days = days_in_month(year, month)
    month_start = f"{year:04d}-{month:02d}-01"
    month_end = f"{year:04d}-{month:02d}-{n_days:02d}"

    emp_stmt = select(Employee).where(Employee.is_active.is_(True)).order_by(Employee.full_name)
    if employee_id is not None:
        emp_stmt = select(Employee).where(Employee.id == employee_id)
    elif projects:
        emp_stmt = emp_stmt.where(Employee.project_name.in_(projects))
    employees = list((await db.execute(emp_stmt)).scalars().all())
    if not employees:
        return []
    ids = [e.id for e in employees]

    punch_result = await db.execute(
        select(PunchRecord).where(
            PunchRecord.employee_id.in_(ids),
            PunchRecord.date >= month_start,
            PunchRecord.date <= month_end,
        )
    )
    punches: dict[int, dict[date, PunchRecord]] = defaultdict(dict)
    for record in punch_result.scalars().all():
        punches[record.employee_id][date.fromisoformat(record.date)] = record

    # Insertion order decides which leave wins when approved leaves overlap.
    leave_result = await db.execute(
        select(LeaveRequest)
        .where(
            LeaveRequest.employee_id.in_(ids),
            LeaveRequest.start_date <= month_end,
            LeaveRequest.end_date >= month_start,
        )
        .order_by(LeaveRequest.id)
    )
    leaves: dict[int, list[LeaveInterval]] = defaultdict(list)
    for leave in leave_result.scalars().all():
        leaves[leave.employee_id].append(LeaveInterval.from_record(leave))

    holidays = await holiday_dates(db)

    out = []
    for emp in employees:
        saturdays_off = saturdays_off_for(emp.project_name, settings.SATURDAY_WORKING_PROJECTS)
        emp_punches = punches.get(emp.id, {})
        days = classify_month(
            year,
            month,
            leaves.get(emp.id, []),
            {d: DayPunch.from_record(r) for d, r in emp_punches.items()},
            holiday_dates=holidays,
            today=as_of,
            saturdays_off=saturdays_off,
            utc_offset=settings.holiday_offset,
        )
        out.append(EmployeeMonth(emp, days, emp_punches, saturdays_off))
    return out


def _iso(value) -> str | None:
    value = ensure_utc(value)
    return value.isoformat() if value else None


def _month_attendance(item: EmployeeMonth, year: int, month: int, as_of: date) -> EmployeeMonthAttendance:
    summary = summarize_month(
        item.days, year=year, month=month, as_of=as_of, saturdays_off=item.saturdays_off
    )
    emp = item.employee
    day_rows = []
    for day in item.days:
        record = item.punches.get(day.date)
        day_rows.append(
            DayStatus(
                date=day.date.isoformat(),
                status=day.code,
                punch_in_time=_iso(record.punch_in_time) if record else None,
                punch_out_time=_iso(record.punch_out_time) if record else None,
            )
        )
    return EmployeeMonthAttendance(
        employee_id=emp.id,
        employee_code=emp.employee_code,
        full_name=emp.full_name,
        designation=emp.designation,
        project_name=emp.project_name,
        total_days=summary.total_days,
        week_offs=summary.week_offs,
        payable_days=summary.payable_days,
        lop=summary.lop,
        counts=StatusCounts(
            present=summary.present,
            absent=summary.absent,
            holidays=summary.holidays,
            comp_off_earned=summary.comp_off_earned,
            leaves=summary.leaves,
        ),
        days=day_rows,
    )


def _employee_summary(item: EmployeeMonth, year: int, month: int, as_of: date) -> EmployeeSummary:
    days = item.days
    comp_off_taken = count_by_status(days, "CompOff", as_of)
    balance = reconcile_comp_off(days, as_of, comp_off_used=comp_off_taken)
    emp = item.employee
    return EmployeeSummary(
        employee_id=emp.id,
        employee_code=emp.employee_code,
        full_name=emp.full_name,
        project_name=emp.project_name,
        total_days=len(days),
        present=count_by_status(days, "P", as_of),
        absent=balance.absent,
        week_offs=week_offs_in_month(year, month, item.saturdays_off),
        holidays=count_by_status(days, "H", as_of),
        cf=balance.comp_off_earned,
        el=count_by_status(days, "EL", as_of),
        sl=count_by_status(days, "SL", as_of),
        cl=count_by_status(days, "CL", as_of),
        comp_off=comp_off_taken,
        lop=loss_of_pay(len(days), balance.payable),
        payable_days=balance.payable,
    )


# ── Monthly attendance grid ────────────────────────────────────────
@router.get("/reports/attendance/{year}/{month}", response_model=AttendanceReportResponse)
async def attendance_report(
    year: int,
    month: int,
    project: list[str] | None = Query(default=None),
    as_of: date | None = Query(default=None, description="Evaluate as if today were this date"),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> AttendanceReportResponse:
    """Day-by-day attendance codes plus counts, payable days and LOP per employee."""
    as_of = _as_of(as_of)
    items = await _classify_period(db, year, month, as_of, projects=project)
    return AttendanceReportResponse(
        year=year,
        month=month,
        month_name=calendar.month_name[month],
        as_of=as_of.isoformat(),
        total_employees=len(items),
        employees=[_month_attendance(item, year, month, as_of) for item in items],
    )


@router.get(
    "/reports/attendance/{year}/{month}/employee/{employee_id}",
    response_model=EmployeeMonthAttendance,
)
async def employee_attendance_report(
    year: int,
    month: int,
    employee_id: int,
    as_of: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> EmployeeMonthAttendance:
    as_of = _as_of(as_of)
    items = await _classify_period(db, year, month, as_of, employee_id=employee_id)
    if not items:
        raise HTTPException(status_code=404, detail="Employee not found")
    return _month_attendance(items[0], year, month, as_of)


# ── Overall summary ────────────────────────────────────────────────
@router.get("/reports/summary/{year}/{month}", response_model=SummaryReportResponse)
async def summary_report(
    year: int,
    month: int,
    project: list[str] | None = Query(default=None),
    as_of: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> SummaryReportResponse:
    """Payable days with earned comp-off offsetting absences."""
    as_of = _as_of(as_of)
    items = await _classify_period(db, year, month, as_of, projects=project)
    return SummaryReportResponse(
        year=year,
        month=month,
        month_name=calendar.month_name[month],
        as_of=as_of.isoformat(),
        employees=[_employee_summary(item, year, month, as_of) for item in items],
    )


SUMMARY_CSV_COLUMNS = [
    "Employee Name", "Employee ID", "Total Days", "Present", "Absent", "Week Offs",
    "CF", "EL", "SL", "CL", "CompOff", "LOP", "Payable Days",
]


@router.get("/reports/summary/{year}/{month}/csv")
async def summary_csv(
    year: int,
    month: int,
    project: list[str] | None = Query(default=None),
    as_of: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> StreamingResponse:
    """Download the monthly summary as CSV."""
    as_of = _as_of(as_of)
    items = await _classify_period(db, year, month, as_of, projects=project)
    rows = [_employee_summary(item, year, month, as_of) for item in items]

    def _line(values: list) -> str:
        buf = io.StringIO()
        csv.writer(buf, lineterminator="\n").writerow(values)
        return buf.getvalue()

    def iter_csv():
        yield _line(SUMMARY_CSV_COLUMNS)
        for r in rows:
            yield _line([
                r.full_name, r.employee_code, r.total_days, r.present, r.absent,
                r.week_offs, r.cf, r.el, r.sl, r.cl, r.comp_off,
                r.lop, r.payable_days,
            ])

    logger.info("Summary CSV for %04d-%02d (%d employees)", year, month, len(rows))
    return StreamingResponse(
        iter_csv(),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename=attendance_summary_{year}_{month:02d}.csv"
        },
    )


# ── Hourly ─────────────────────────────────────────────────────────
@router.get("/reports/hourly/{date_str}", response_model=HourlyReportResponse)
async def hourly_report(
    date_str: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> HourlyReportResponse:
    """Hours worked per employee on one day and the hours-based status."""
    try:
        day = date.fromisoformat(date_str)
    except ValueError:
        raise InvalidPeriodError(f"Date must be YYYY-MM-DD, got {date_str!r}") from None

    result = await db.execute(
        select(Employee, PunchRecord)
        .outerjoin(
            PunchRecord,
            (PunchRecord.employee_id == Employee.id) & (PunchRecord.date == day.isoformat()),
        )
        .where(Employee.is_active.is_(True))
        .order_by(Employee.full_name)
    )

    rows = []
    for emp, record in result.all():
        punch_in = ensure_utc(record.punch_in_time) if record else None
        punch_out = ensure_utc(record.punch_out_time) if record else None
        hours = hours_worked(punch_in, punch_out)
        rows.append(
            HourlyRow(
                employee_id=emp.id,
                employee_code=emp.employee_code,
                full_name=emp.full_name,
                punch_in_time=punch_in.isoformat() if punch_in else None,
                punch_out_time=punch_out.isoformat() if punch_out else None,
                hours_worked=hours,
                status=status_from_hours(hours, settings.FULL_DAY_HOURS, settings.HALF_DAY_HOURS),
            )
        )

    return HourlyReportResponse(
        date=day.isoformat(),
        full_day_hours=settings.FULL_DAY_HOURS,
        half_day_hours=settings.HALF_DAY_HOURS,
        rows=rows,
    )


# ── Health / Status ────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check."""
    try:
        await db.execute(select(1))
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
        return HealthResponse(db=False)
    return HealthResponse(db=True)


@router.get("/status", response_model=StatusResponse)
async def system_status(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> StatusResponse:
    today = local_today(settings.holiday_offset).isoformat()
    emp_count = await db.execute(
        select(func.count(Employee.id)).where(Employee.is_active.is_(True))
    )
    punch_count = await db.execute(
        select(func.count(PunchRecord.id)).where(PunchRecord.date == today)
    )
    pending = await db.execute(
        select(func.count(LeaveRequest.id)).where(LeaveRequest.status == "Pending")
    )
    return StatusResponse(
        total_employees=emp_count.scalar() or 0,
        today_punches=punch_count.scalar() or 0,
        pending_leaves=pending.scalar() or 0,
        status="operational",
    )
