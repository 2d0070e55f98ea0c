from __future__ import annotations

import calendar

from ._rule import Ordinality, RecurrenceRule, RecurrenceType, Weekdays


def describe(rule: RecurrenceRule) -> str:
    out = _describe_pattern(rule)

    if rule.recurrence_type is not RecurrenceType.NON_RECURRING:
        out += f" starting {rule.effective_date.isoformat()}"
        if rule.expiration_date is not None:
            out += f" until {rule.expiration_date.isoformat()}"
        if rule.occurrence_limit is not None:
            noun = "occurrence" if rule.occurrence_limit == 1 else "occurrences"
            out += f" for {rule.occurrence_limit} {noun}"

    return out


def _describe_pattern(rule: RecurrenceRule) -> str:
    step = rule.step
    mask = rule.weekday_mask

    match rule.recurrence_type:
        case RecurrenceType.NON_RECURRING:
            return f"once on {rule.effective_date.isoformat()}"

        case RecurrenceType.DAILY:
            if mask:
                return "every weekday"
            return _every(step, "day")

        case RecurrenceType.WEEKLY:
            if mask:
                return f"{_every(step, 'week')} on {mask}"
            return _every(step, "week")

        case RecurrenceType.MONTHLY:
            if rule.use_first_full_work_week:
                out = f"the first full work week of {_every(step, 'month')}"
                if mask:
                    out += f" on {mask}"
                return out
            if rule.ordinality is not Ordinality.NONE:
                return f"{_ordinal_days(rule.ordinality, mask)} of {_every(step, 'month')}"
            if rule.day_of_month is not None:
                return f"{_every(step, 'month')} on the {_nth(rule.day_of_month)}"
            return _every(step, "month")

        case RecurrenceType.YEARLY:
            month = _month_abbr(rule.month)
            if rule.ordinality is not Ordinality.NONE:
                return f"{_ordinal_days(rule.ordinality, mask)} of {month} {_every(step, 'year')}"
            if rule.day_of_month is not None:
                return f"{_every(step, 'year')} on {month} {rule.day_of_month}"
            return _every(step, "year")

    # Should be unreachable
    raise ValueError(f"unknown recurrence type: {rule.recurrence_type!r}")  # pragma: no cover


def _every(step: int, unit: str) -> str:
    if step > 1:
        return f"every {step} {unit}s"
    return f"every {unit}"


def _ordinal_days(ordinality: Ordinality, mask: Weekdays) -> str:
    days = str(mask) if mask else "day"
    return f"the {ordinality} {days}"


def _month_abbr(month: int | None) -> str:
    if month is None or not 1 <= month <= 12:
        return "?"
    return calendar.month_abbr[month].lower()


def _nth(n: int) -> str:
    return f"{n}{_ordinal_suffix(n)}"


def _ordinal_suffix(n: int) -> str:
    mod100 = n % 100
    if 11 <= mod100 <= 13:
        return "th"
    match n % 10:
        case 1:
            return "st"
        case 2:
            return "nd"
        case 3:
            return "rd"
        case _:
            return "th"
