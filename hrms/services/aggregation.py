"""
Month-level counts over classified days: status counts, payable days,
loss of pay, comp-off reconciliation and hours-based status.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .classifier import ABSENT, COMP_OFF_EARNED, HOLIDAY, PRESENT, ClassifiedDay
from .holidays import week_offs_in_month

PAYABLE_CODES = frozenset({PRESENT, HOLIDAY, COMP_OFF_EARNED, "EL", "SL", "CL", "CompOff"})
LEAVE_CODES = ("EL", "SL", "CL", "CompOff")


def _elapsed(days: Iterable[ClassifiedDay], as_of: Optional[date]) -> list[ClassifiedDay]:
    as_of = as_of or date.today()
    return [d for d in days if d.date <= as_of]


def count_by_status(days: Iterable[ClassifiedDay], code: str, as_of: Optional[date] = None) -> int:
    return sum(1 for d in _elapsed(days, as_of) if d.code == code)


def count_payable_days(days: Iterable[ClassifiedDay], as_of: Optional[date] = None) -> int:
    # Future days are also filtered here, though they already carry "" and
    # would not be counted anyway.
    return sum(1 for d in _elapsed(days, as_of) if d.code in PAYABLE_CODES)


def loss_of_pay(total_days: int, payable: int) -> int:
    return total_days - payable


@dataclass(frozen=True)
class CompOffBalance:
    payable: int
    absent: int
    comp_off_earned: int


def reconcile_comp_off(
    days: Sequence[ClassifiedDay],
    as_of: Optional[date] = None,
    comp_off_used: int = 0,
) -> CompOffBalance:
    """Offset absences with comp-off days earned in the same month.

    Every earned ``CF`` day is payable. Each one also cancels one ``A`` day
    from the reported absences. ``comp_off_used`` is comp-off taken from the
    leave balance and is added to the payable total.
    """
    elapsed = _elapsed(days, as_of)

    def tally(code: str) -> int:
        return sum(1 for d in elapsed if d.code == code)

    absent = tally(ABSENT)
    earned = tally(COMP_OFF_EARNED)

    payable = (
        tally(PRESENT) + tally(HOLIDAY) + tally("EL") + tally("SL") + tally("CL")
        + earned + comp_off_used
    )
    return CompOffBalance(
        payable=payable,
        absent=absent - min(absent, earned),
        comp_off_earned=earned,
    )


def hours_worked(punch_in: Optional[datetime], punch_out: Optional[datetime]) -> float:
    if not punch_in or not punch_out:
        return 0.0
    return round(abs((punch_out - punch_in).total_seconds()) / 3600, 2)


def status_from_hours(hours: float, full_day: float = 7.0, half_day: float = 4.5) -> str:
    if hours >= full_day:
        return "Present"
    if hours >= half_day:
        return "Half Day"
    return "Absent"


@dataclass(frozen=True)
class MonthSummary:
    total_days: int
    present: int
    absent: int
    holidays: int
    comp_off_earned: int
    week_offs: int
    payable_days: int
    lop: int
    leaves: dict[str, int] = field(default_factory=dict)


def summarize_month(
    days: Sequence[ClassifiedDay],
    *,
    year: int,
    month: int,
    as_of: Optional[date] = None,
    saturdays_off: bool = True,
) -> MonthSummary:
    total = len(days)
    payable = count_payable_days(days, as_of)
    return MonthSummary(
        total_days=total,
        present=count_by_status(days, PRESENT, as_of),
        absent=count_by_status(days, ABSENT, as_of),
        holidays=count_by_status(days, HOLIDAY, as_of),
        comp_off_earned=count_by_status(days, COMP_OFF_EARNED, as_of),
        week_offs=week_offs_in_month(year, month, saturdays_off),
        payable_days=payable,
        lop=loss_of_pay(total, payable),
        leaves={code: count_by_status(days, code, as_of) for code in LEAVE_CODES},
    )
