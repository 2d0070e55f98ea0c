from __future__ import annotations

import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from ._error import RecurError
from ._rule import Weekdays


def make_date(year: int, month: int, day: int) -> date:
    try:
        return date(year, month, day)
    except ValueError as e:
        raise RecurError.calendar(f"no such date {year:04d}-{month:02d}-{day:02d}: {e}") from e


def add_days(d: date, days: int) -> date:
    try:
        return d + timedelta(days=days)
    except OverflowError as e:
        raise RecurError.calendar(f"{d} + {days} days is out of range") from e


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    try:
        return d + relativedelta(months=months)
    except (ValueError, OverflowError) as e:
        raise RecurError.calendar(f"{d} + {months} months is out of range") from e


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    _, last = calendar.monthrange(d.year, d.month)
    return d.replace(day=last)


def start_of_week(d: date) -> date:
    """The Sunday on or before ``d``."""
    # date.weekday(): Monday=0 ... Sunday=6
    return add_days(d, -((d.weekday() + 1) % 7))


def week_matches(mask: Weekdays, start: date) -> list[date]:
    """Dates among the seven days from ``start`` whose weekday is in ``mask``.

    The result follows canonical weekday order (Monday first, Sunday last), not
    calendar order: for a Sunday ``start`` the Sunday itself comes last.
    """
    pool = {Weekdays.for_date(d): d for d in (add_days(start, i) for i in range(7))}
    return [pool[day] for day in mask.days()]
