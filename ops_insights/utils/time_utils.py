"""
Date helpers for period-based financial records.

Financial records are keyed by calendar month; every ``period`` is normalised
to the first day of its month so grouping and range filters compare cleanly.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def today_utc() -> date:
    """Return today's date in UTC."""
    return utcnow().date()


def month_start(d: date) -> date:
    """Return the first day of ``d``'s month.

    Example::

        >>> month_start(date(2024, 9, 17))
        datetime.date(2024, 9, 1)
    """
    return d.replace(day=1)


def add_months(d: date, months: int) -> date:
    """Shift ``d`` by ``months`` calendar months, clamping the day.

    ``months`` may be negative. Day-of-month is clamped to the target month's
    length (Mar 31 − 1 month → Feb 28/29).

    Args:
        d:      Anchor date.
        months: Number of months to add (negative to go back).

    Returns:
        Shifted date.
    """
    total = d.year * 12 + (d.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    return date(year, month, min(d.day, _days_in_month(year, month)))


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        return 31
    return (date(year, month + 1, 1) - date(year, month, 1)).days
