"""
Attendance-day classification.

Each calendar day of an employee's month resolves to exactly one code,
checked in this order (first match wins):

1. the day is after *today*             -> ``""`` (not yet evaluated)
2. an approved leave covers the day     -> the leave's type, verbatim
3. the day is a holiday / week-off      -> ``"CF"`` if punched in and out, else ``"H"``
4. otherwise                            -> ``"P"`` or ``"A"``

When several approved leaves overlap the same day the first one in the
order given wins; no other tie-break is applied.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional

from .holidays import is_holiday, month_days

UNCLASSIFIED = ""
PRESENT = "P"
ABSENT = "A"
HOLIDAY = "H"
COMP_OFF_EARNED = "CF"

APPROVED = "Approved"


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # ISO date or datetime string; the time part is dropped.
    return date.fromisoformat(value[:10])


@dataclass(frozen=True)
class LeaveInterval:
    start_date: date
    end_date: date
    leave_type: str
    status: str

    def covers(self, day: date) -> bool:
        return self.status == APPROVED and self.start_date <= day <= self.end_date

    @classmethod
    def from_record(cls, record: Any) -> "LeaveInterval":
        return cls(
            start_date=_as_date(record.start_date),
            end_date=_as_date(record.end_date),
            leave_type=record.leave_type,
            status=record.status,
        )


@dataclass(frozen=True)
class DayPunch:
    status: Optional[str] = None
    punch_in_time: Optional[datetime] = None
    punch_out_time: Optional[datetime] = None

    @property
    def complete(self) -> bool:
        return bool(self.punch_in_time) and bool(self.punch_out_time)

    @classmethod
    def from_record(cls, record: Any) -> "DayPunch":
        return cls(
            status=record.status,
            punch_in_time=record.punch_in_time,
            punch_out_time=record.punch_out_time,
        )


@dataclass(frozen=True)
class ClassifiedDay:
    date: date
    code: str


def find_leave(day: date, leaves: Sequence[LeaveInterval]) -> Optional[LeaveInterval]:
    return next((leave for leave in leaves if leave.covers(day)), None)


def classify_day(
    day: date,
    leaves: Sequence[LeaveInterval],
    punch: Optional[DayPunch] = None,
    *,
    holiday_dates: Collection[str] = (),
    today: Optional[date] = None,
    saturdays_off: bool = True,
    utc_offset: timedelta = timedelta(0),
) -> str:
    today = today or date.today()
    if day > today:
        return UNCLASSIFIED

    leave = find_leave(day, leaves)
    if leave is not None:
        return leave.leave_type

    if is_holiday(day, holiday_dates, saturdays_off=saturdays_off, utc_offset=utc_offset):
        if punch is not None and punch.complete:
            return COMP_OFF_EARNED
        return HOLIDAY

    if punch is None or punch.status != "Present" or not punch.punch_in_time:
        return ABSENT
    # A shift still in progress today counts as present.
    if punch.punch_out_time or day == today:
        return PRESENT
    return ABSENT


def classify_month(
    year: int,
    month: int,
    leaves: Sequence[LeaveInterval],
    punches: Mapping[date, DayPunch],
    *,
    holiday_dates: Collection[str] = (),
    today: Optional[date] = None,
    saturdays_off: bool = True,
    utc_offset: timedelta = timedelta(0),
) -> list[ClassifiedDay]:
    """Classify every day of *month*; one entry per calendar day."""
    today = today or date.today()
    return [
        ClassifiedDay(
            date=day,
            code=classify_day(
                day,
                leaves,
                punches.get(day),
                holiday_dates=holiday_dates,
                today=today,
                saturdays_off=saturdays_off,
                utc_offset=utc_offset,
            ),
        )
        for day in month_days(year, month)
    ]
