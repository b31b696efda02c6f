"""Calendar helpers for trade dates.

Trade dates are naive local datetimes (the desktop app records the date a
trade was entered, not an exchange timestamp).
"""

import calendar
from datetime import date, datetime, timedelta


def is_same_day(a: datetime | date, b: datetime | date) -> bool:
    a_date = a.date() if isinstance(a, datetime) else a
    b_date = b.date() if isinstance(b, datetime) else b
    return a_date == b_date


def add_months(dt: datetime | date, months: int) -> datetime | date:
    """Shift ``dt`` by a number of calendar months, clamping the day.

    31 January plus one month is 28 (or 29) February.
    """
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def month_diff(later: datetime, earlier: datetime) -> float:
    """Fractional calendar months from ``earlier`` to ``later``.

    Counts whole months first, then adds the elapsed fraction of the month
    that follows. Negative when ``later`` precedes ``earlier``.
    """
    if later.day < earlier.day:
        return -month_diff(earlier, later)
    whole = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    anchor = add_months(earlier, whole)
    if later < anchor:
        next_anchor = add_months(earlier, whole - 1)
        fraction = (later - anchor) / (anchor - next_anchor)
    else:
        next_anchor = add_months(earlier, whole + 1)
        fraction = (later - anchor) / (next_anchor - anchor)
    return whole + fraction


def year_diff(later: datetime, earlier: datetime) -> float:
    """Fractional years between two datetimes, as calendar months / 12.

    Exactly one calendar year apart is ``1.0``; a day more is above it.
    """
    return month_diff(later, earlier) / 12


def years_ago(today: date, years: int) -> date:
    """Same calendar day ``years`` back (29 February falls back to the 28th)."""
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)


def is_monday(d: datetime | date) -> bool:
    return d.weekday() == 0


def day_before(dt: datetime) -> datetime:
    return dt - timedelta(days=1)
