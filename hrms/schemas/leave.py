"""Pydantic schemas for leave requests and holidays."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator, model_validator

LEAVE_STATUSES = ("Pending", "Approved", "Rejected")


class LeaveCreate(BaseModel):
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    reason: str | None = None

    @field_validator("leave_type")
    @classmethod
    def _leave_type(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 30:
            raise ValueError("Leave type must be 1-30 characters")
        return v

    @model_validator(mode="after")
    def _ordered(self) -> "LeaveCreate":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    @property
    def number_of_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class LeaveStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        if v not in LEAVE_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(LEAVE_STATUSES)}")
        return v


class LeaveRead(BaseModel):
    id: int
    employee_id: int
    leave_type: str
    start_date: str
    end_date: str
    number_of_days: float
    status: str
    reason: str | None
    applied_on: datetime | None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class LeaveHistoryResponse(BaseModel):
    employee_id: int
    employee_name: str
    total_leaves: int
    pending: int
    approved: int
    rejected: int
    days_by_type: dict[str, float]  # approved days per leave type
    leave_history: list[LeaveRead]


# ── Holidays ───────────────────────────────────────────────────────
class HolidayCreate(BaseModel):
    date: str  # YYYY-MM-DD
    description: str

    @field_validator("date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        v = v.strip()
        try:
            date.fromisoformat(v)
        except ValueError:
            raise ValueError("date must be YYYY-MM-DD") from None
        if len(v) != 10:
            raise ValueError("date must be YYYY-MM-DD")
        return v

    @field_validator("description")
    @classmethod
    def _description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Description must not be empty")
        if len(v) > 200:
            raise ValueError("Description must not exceed 200 characters")
        return v


class HolidayRead(BaseModel):
    id: int
    date: str
    description: str

    model_config = {"from_attributes": True}
