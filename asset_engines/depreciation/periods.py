"""
asset_engines.depreciation.periods -- Calendar-month arithmetic.

Months are handled as ordinals (``year * 12 + month - 1``) so schedule
positions can be compared and offset without date objects.
"""

from __future__ import annotations

import calendar
from datetime import date


def month_ordinal(year: int, month: int) -> int:
    """Ordinal of a calendar month; consecutive months differ by one."""
    return year * 12 + month - 1


def date_ordinal(value: date) -> int:
    """Ordinal of the calendar month containing ``value``."""
    return month_ordinal(value.year, value.month)


def from_ordinal(ordinal: int) -> tuple[int, int]:
    """Inverse of ``month_ordinal``: returns ``(year, month)``."""
    year, index = divmod(ordinal, 12)
    return year, index + 1


def add_months(value: date, months: int) -> date:
    """
    Shift ``value`` by whole calendar months.

    The day is kept where possible and clamped to the end of shorter
    months (Jan 31 + 1 month is Feb 28/29).
    """
    year, month = from_ordinal(date_ordinal(value) + months)
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
