# shopbooks/modules/reporting/periods.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

PERIODS = (
    "today",
    "yesterday",
    "this_week",
    "last_week",
    "this_month",
    "last_month",
    "this_quarter",
    "last_quarter",
    "this_year",
    "last_year",
)

PERIOD_LABELS = {p: p.replace("_", " ").title() for p in PERIODS}


@dataclass(frozen=True)
class DateRange:
    """Inclusive ISO date range (YYYY-MM-DD on both ends)."""

    date_from: str
    date_to: str

    @classmethod
    def of(cls, start: date, end: date) -> "DateRange":
        return cls(start.isoformat(), end.isoformat())


def _month_start(year: int, month: int) -> date:
    # month may run outside 1..12 when stepping back a quarter
    while month < 1:
        month += 12
        year -= 1
    return date(year, month, 1)


def date_range_for_period(period: str, today: Optional[date] = None) -> DateRange:
    """
    Resolve a named preset into a DateRange.

    'this_*' periods end today; 'last_*' periods cover the whole previous
    period. Weeks start on Sunday.
    """
    today = today or date.today()

    if period == "today":
        return DateRange.of(today, today)
    if period == "yesterday":
        y = today - timedelta(days=1)
        return DateRange.of(y, y)

    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday starts the week
    days_since_sunday = (today.weekday() + 1) % 7
    week_start = today - timedelta(days=days_since_sunday)
    if period == "this_week":
        return DateRange.of(week_start, today)
    if period == "last_week":
        return DateRange.of(week_start - timedelta(days=7), week_start - timedelta(days=1))

    month_start = date(today.year, today.month, 1)
    if period == "this_month":
        return DateRange.of(month_start, today)
    if period == "last_month":
        prev_end = month_start - timedelta(days=1)
        return DateRange.of(date(prev_end.year, prev_end.month, 1), prev_end)

    quarter_start = _month_start(today.year, ((today.month - 1) // 3) * 3 + 1)
    if period == "this_quarter":
        return DateRange.of(quarter_start, today)
    if period == "last_quarter":
        prev_start = _month_start(quarter_start.year, quarter_start.month - 3)
        return DateRange.of(prev_start, quarter_start - timedelta(days=1))

    if period == "this_year":
        return DateRange.of(date(today.year, 1, 1), today)
    if period == "last_year":
        return DateRange.of(date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))

    raise ValueError(f"Unknown report period {period!r}")


def detect_period(date_range: DateRange, today: Optional[date] = None) -> str:
    """Name of the preset matching `date_range`, or 'custom'."""
    for period in PERIODS:
        if date_range_for_period(period, today) == date_range:
            return period
    return "custom"
