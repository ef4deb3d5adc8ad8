"""Calendar month helpers.

Months are represented as the ``date`` of their first day. Every function
accepts a ``date`` or ``datetime`` anywhere in the month.
"""

from __future__ import annotations

import re
from calendar import monthrange
from collections.abc import Iterator
from datetime import date, datetime

from zerobudget.utils.parsing import to_date

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


def start_of_month(value: date | datetime) -> date:
    d = to_date(value)
    return date(d.year, d.month, 1)


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def end_of_month(value: date | datetime) -> date:
    """Return the last calendar day of the month containing value."""
    d = to_date(value)
    return date(d.year, d.month, days_in_month(d.year, d.month))


def add_months(value: date | datetime, count: int) -> date:
    """Return the first day of the month count months after value."""
    d = to_date(value)
    index = d.year * 12 + (d.month - 1) + count
    return date(index // 12, index % 12 + 1, 1)


def previous_month(value: date | datetime) -> date:
    return add_months(value, -1)


def next_month(value: date | datetime) -> date:
    return add_months(value, 1)


def is_in_month(value: date | datetime, month: date | datetime) -> bool:
    """Whether value falls between the first and last day of month, inclusive."""
    d = to_date(value)
    m = to_date(month)
    return (d.year, d.month) == (m.year, m.month)


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping day into the month's valid range.

    Day 31 in April becomes April 30; day 29 in a non-leap February
    becomes February 28.
    """
    return date(year, month, min(max(day, 1), days_in_month(year, month)))


def iter_months(start: date | datetime, end: date | datetime) -> Iterator[date]:
    """Yield the first day of each month from start to end, inclusive."""
    current = start_of_month(start)
    last = start_of_month(end)
    while current <= last:
        yield current
        current = next_month(current)


def parse_month(text: str) -> date:
    """Parse a "YYYY-MM" string into the first day of that month.

    Raises:
        ValueError: If text is not a valid month
    """
    match = _MONTH_RE.match(text.strip())
    if not match:
        raise ValueError(f"Invalid month {text!r}, expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {text!r}, expected YYYY-MM")
    return date(year, month, 1)
