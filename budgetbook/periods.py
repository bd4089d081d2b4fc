"""Budget month resolution.

A budget month is keyed by ``YYYY-MM`` and covers one full cycle starting on
the configured cycle start day.  When the start day does not exist in a
calendar month (31 in April, 30 in February) it is clamped to that month's
last day, so every month has exactly one start date.
"""

from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Tuple

from .errors import InvalidArgument

_MONTH_KEY_PATTERN = re.compile(r'^(\d{4})-(\d{2})$')


@dataclass(frozen=True)
class Period:
    """Inclusive date range of one budget month."""

    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def dates(self) -> Iterator[date]:
        for offset in range(self.days):
            yield self.start + timedelta(days=offset)


def parse_month_key(month_key: str) -> Tuple[int, int]:
    """Split a ``YYYY-MM`` key into ``(year, month)``.

    Raises:
        InvalidArgument: If the key is not ``YYYY-MM`` or the month is not 1-12
    """
    match = _MONTH_KEY_PATTERN.match(str(month_key))
    if not match:
        raise InvalidArgument(f"Month key must look like YYYY-MM, got {month_key!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidArgument(f"Month key out of range: {month_key!r}")
    return year, month


def format_month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def shift_month(month_key: str, months: int) -> str:
    """Move a month key forward (or backward, for negative ``months``)."""
    year, month = parse_month_key(month_key)
    index = year * 12 + (month - 1) + months
    return format_month_key(index // 12, index % 12 + 1)


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def _check_start_day(cycle_start_day: int) -> None:
    if isinstance(cycle_start_day, bool) or not isinstance(cycle_start_day, int):
        raise InvalidArgument(f"Cycle start day must be an integer, got {cycle_start_day!r}")
    if not 1 <= cycle_start_day <= 31:
        raise InvalidArgument(f"Cycle start day must be within 1-31, got {cycle_start_day}")


def period_start(month_key: str, cycle_start_day: int) -> date:
    """First day of the budget month, with the start day clamped to the month length."""
    _check_start_day(cycle_start_day)
    year, month = parse_month_key(month_key)
    return date(year, month, min(cycle_start_day, days_in_month(year, month)))


def resolve_period(month_key: str, cycle_start_day: int) -> Period:
    """Resolve a month key into its inclusive date range.

    The period ends the day before the next month's (clamped) start, so
    consecutive periods never overlap or leave gaps.

    Args:
        month_key: ``YYYY-MM`` key of the budget month
        cycle_start_day: Configured start day, 1-31

    Returns:
        Period with ``start`` and inclusive ``end``

    Raises:
        InvalidArgument: If the month key or start day is malformed

    Example:
        >>> resolve_period('2025-01', 31)
        Period(start=datetime.date(2025, 1, 31), end=datetime.date(2025, 2, 27))
    """
    start = period_start(month_key, cycle_start_day)
    next_start = period_start(shift_month(month_key, 1), cycle_start_day)
    return Period(start=start, end=next_start - timedelta(days=1))


def month_key_for_date(day: date, cycle_start_day: int) -> str:
    """Return the key of the budget month whose period contains ``day``."""
    key = format_month_key(day.year, day.month)
    if day < period_start(key, cycle_start_day):
        return shift_month(key, -1)
    return key
