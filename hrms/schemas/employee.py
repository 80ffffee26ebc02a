"""Pydantic schemas for employees and their daily punch records."""

from __future__ import annotations

import re
import datetime as dt

from pydantic import BaseModel, field_validator, model_validator

_CODE_RE = re.compile(r"^[A-Za-z0-9_-]{2,32}$")


def _check_code(v: str) -> str:
    v = v.strip()
    if not _CODE_RE.match(v):
        raise ValueError("Employee code must be 2-32 letters, digits, '-' or '_'")
    return v


# ── Employee ────────────────────────────────────────────────────────
class EmployeeCreate(BaseModel):
    employee_code: str
    full_name: str
    designation: str | None = None
    project_name: str | None = None
    email: str | None = None
    phone: str | None = None

    @field_validator("employee_code")
    @classmethod
    def _code(cls, v: str) -> str:
        return _check_code(v)

    @field_validator("full_name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v


class EmployeeUpdate(BaseModel):
    full_name: str | None = None
    designation: str | None = None
    project_name: str | None = None
    email: str | None = None
    phone: str | None = None


class EmployeeRead(BaseModel):
    id: int
    employee_code: str
    full_name: str
    designation: str | None
    project_name: str | None
    email: str | None
    phone: str | None
    is_active: bool
    created_at: dt.datetime | None

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    success: bool
    message: str


# ── Punches ─────────────────────────────────────────────────────────
class PunchRequest(BaseModel):
    employee_code: str
    project_name: str | None = None

    @field_validator("employee_code")
    @classmethod
    def _code(cls, v: str) -> str:
        return _check_code(v)


class PunchRecordUpsert(BaseModel):
    """Admin backfill of one employee-day (regularisation)."""

    employee_id: int
    date: dt.date
    status: str | None = "Present"
    punch_in_time: dt.datetime | None = None
    punch_out_time: dt.datetime | None = None
    remarks: str | None = None

    @model_validator(mode="after")
    def _out_after_in(self) -> "PunchRecordUpsert":
        if self.punch_out_time and not self.punch_in_time:
            raise ValueError("punch_out_time requires punch_in_time")
        return self


class PunchRecordRead(BaseModel):
    id: int
    employee_id: int
    date: str
    status: str | None
    punch_in_time: dt.datetime | None
    punch_out_time: dt.datetime | None
    project_name: str | None = None
    remarks: str | None = None
    hours_worked: float = 0.0

    model_config = {"from_attributes": True}
