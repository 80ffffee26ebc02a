"""
Holiday calendar rules.

A day is a non-working day when it is a Sunday, a 2nd or 4th Saturday
(for projects that take Saturdays off), or appears in the government
holiday list.

Holiday-list entries are compared against the office's local midnight
rendered as a UTC date. With a positive offset such as ``+05:30`` that
key is the *previous* calendar day, so a holiday listed as 2025-08-15
lands on the 16th while the weekday rules still use the local date.
That mismatch is existing behaviour and is kept as-is.
"""

from __future__ import annotations

import calendar
from collections.abc import Collection, Iterable
from datetime import date, datetime, time, timedelta, timezone

from hrms.core.exceptions import InvalidPeriodError

SUNDAY = 6
SATURDAY = 5

DEFAULT_GOVERNMENT_HOLIDAYS: list[tuple[str, str]] = [
    ("2024-01-26", "Republic Day"),
    ("2024-03-25", "Holi"),
    ("2024-04-09", "Ram Navami"),
    ("2024-05-01", "Labor Day"),
    ("2024-08-08", "Varmahalski Holiday"),
    ("2024-08-15", "Independence Day"),
    ("2024-10-02", "Gandhi Jayanti"),
    ("2024-11-14", "Diwali"),
    ("2024-12-25", "Christmas"),
    ("2025-01-26", "Republic Day"),
    ("2025-03-14", "Holi"),
    ("2025-04-09", "Ram Navami"),
    ("2025-05-01", "Labor Day"),
    ("2025-08-08", "Varmahalski Holiday"),
    ("2025-08-15", "Independence Day"),
    ("2025-10-02", "Gandhi Jayanti"),
    ("2025-11-03", "Diwali"),
    ("2025-12-25", "Christmas"),
    ("2026-01-26", "Republic Day"),
    ("2026-03-03", "Holi"),
    ("2026-03-29", "Ram Navami"),
    ("2026-05-01", "Labor Day"),
    ("2026-08-08", "Varmahalski Holiday"),
    ("2026-08-15", "Independence Day"),
    ("2026-10-02", "Gandhi Jayanti"),
    ("2026-10-23", "Diwali"),
    ("2026-12-25", "Christmas"),
    ("2027-01-26", "Republic Day"),
    ("2027-03-18", "Ram Navami"),
    ("2027-03-22", "Holi"),
    ("2027-05-01", "Labor Day"),
    ("2027-08-08", "Varmahalski Holiday"),
    ("2027-08-15", "Independence Day"),
    ("2027-10-02", "Gandhi Jayanti"),
    ("2027-11-12", "Diwali"),
    ("2027-12-25", "Christmas"),
    ("2028-01-26", "Republic Day"),
    ("2028-03-10", "Holi"),
    ("2028-04-06", "Ram Navami"),
    ("2028-05-01", "Labor Day"),
    ("2028-08-08", "Varmahalski Holiday"),
    ("2028-08-15", "Independence Day"),
    ("2028-10-02", "Gandhi Jayanti"),
    ("2028-10-30", "Diwali"),
    ("2028-12-25", "Christmas"),
]


def is_second_or_fourth_saturday(day: date) -> bool:
    if day.weekday() != SATURDAY:
        return False
    occurrence = (day.day - 1) // 7 + 1
    return occurrence in (2, 4)


def holiday_key(day: date, utc_offset: timedelta = timedelta(0)) -> str:
    """Local midnight of *day* expressed as a ``YYYY-MM-DD`` UTC date."""
    local_midnight = datetime.combine(day, time.min, tzinfo=timezone(utc_offset))
    return local_midnight.astimezone(timezone.utc).date().isoformat()


def is_holiday(
    day: date,
    holiday_dates: Collection[str] = (),
    *,
    saturdays_off: bool = True,
    utc_offset: timedelta = timedelta(0),
) -> bool:
    if day.weekday() == SUNDAY:
        return True
    if saturdays_off and is_second_or_fourth_saturday(day):
        return True
    return holiday_key(day, utc_offset) in holiday_dates


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be 1-12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidPeriodError(f"Year out of range: {year}")
    return calendar.monthrange(year, month)[1]


def month_days(year: int, month: int) -> list[date]:
    """Every calendar day of the month, in order."""
    return [date(year, month, d) for d in range(1, days_in_month(year, month) + 1)]


def week_offs_in_month(year: int, month: int, saturdays_off: bool = True) -> int:
    """Number of Sundays (plus 2nd/4th Saturdays when taken off) in the month."""
    count = 0
    for day in month_days(year, month):
        if day.weekday() == SUNDAY:
            count += 1
        elif saturdays_off and is_second_or_fourth_saturday(day):
            count += 1
    return count


def local_today(utc_offset: timedelta = timedelta(0)) -> date:
    """Today's date on the office clock."""
    return datetime.now(timezone(utc_offset)).date()


def saturdays_off_for(project_name: str | None, working_projects: Iterable[str]) -> bool:
    """Whether 2nd/4th Saturdays are week-offs for the given project."""
    return project_name not in set(working_projects)
