"""Pydantic schemas for attendance / summary / hourly reports."""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Monthly attendance grid ────────────────────────────────────────
class DayStatus(BaseModel):
    date: str
    status: str  # "", P, A, H, CF or a leave type
    punch_in_time: str | None = None
    punch_out_time: str | None = None


class StatusCounts(BaseModel):
    present: int
    absent: int
    holidays: int
    comp_off_earned: int
    leaves: dict[str, int] = Field(default_factory=dict)  # EL / SL / CL / CompOff


class EmployeeMonthAttendance(BaseModel):
    employee_id: int
    employee_code: str
    full_name: str
    designation: str | None
    project_name: str | None
    total_days: int
    week_offs: int
    payable_days: int
    lop: int
    counts: StatusCounts
    days: list[DayStatus]


class AttendanceReportResponse(BaseModel):
    year: int
    month: int
    month_name: str
    as_of: str
    total_employees: int
    employees: list[EmployeeMonthAttendance]


# ── Overall summary (comp-off reconciled) ──────────────────────────
class EmployeeSummary(BaseModel):
    employee_id: int
    employee_code: str
    full_name: str
    project_name: str | None
    total_days: int
    present: int
    absent: int
    week_offs: int
    holidays: int
    cf: int  # every CF day earned, all payable
    el: int
    sl: int
    cl: int
    comp_off: int
    lop: int
    payable_days: int


class SummaryReportResponse(BaseModel):
    year: int
    month: int
    month_name: str
    as_of: str
    employees: list[EmployeeSummary]


# ── Hourly ─────────────────────────────────────────────────────────
class HourlyRow(BaseModel):
    employee_id: int
    employee_code: str
    full_name: str
    punch_in_time: str | None
    punch_out_time: str | None
    hours_worked: float
    status: str  # Present | Half Day | Absent


class HourlyReportResponse(BaseModel):
    date: str
    full_day_hours: float
    half_day_hours: float
    rows: list[HourlyRow]


# ── Health / Status ────────────────────────────────────────────────
class HealthResponse(BaseModel):
    db: bool


class StatusResponse(BaseModel):
    total_employees: int
    today_punches: int
    pending_leaves: int
    status: str
