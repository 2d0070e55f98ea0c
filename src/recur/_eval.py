from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from ._calendar import (
    add_days,
    add_months,
    make_date,
    month_end,
    month_start,
    start_of_week,
    week_matches,
)
from ._error import RecurError
from ._options import DEFAULT_OPTIONS, EvalOptions
from ._rule import DateRange, Ordinality, RecurrenceRule, RecurrenceType, Weekdays
from ._window import is_window_valid, trim_to_window

logger = logging.getLogger(__name__)

# =============================================================================
# Bounds
# =============================================================================
# Every generator takes the caller's window end and replaces it with the
# rule's expiration date when one is set ("stop"). Generators walk forward
# from the effective date until their cursor reaches stop; the caller's
# window is applied afterwards by trim_to_window.
#
# Stepping loops (daily, weekly plain, fixed-day) emit dates strictly before
# stop. Week-scanning modes (weekly with a mask, ordinal, first full work
# week) clip the dates they emit to [effective_date, stop].
#
# The occurrence limit counts generated dates, before the caller's window is
# applied: a limit of 3 with a window past the first three yields nothing.
# =============================================================================

# =============================================================================
# Ordinal Weeks
# =============================================================================
# "Second Tuesday" counts weeks, not days: starting from the Sunday of the
# week holding the 1st, each week with at least one masked day inside the
# month counts once. The week whose count equals the target contributes all
# of its masked days. With a single-day mask this is the usual nth weekday.
#
# "Last" needs no counting: the final seven days of a month hold exactly one
# of each weekday, so the masked days among them are the last ones.
# =============================================================================


# --- Helpers ---


def _stop(rule: RecurrenceRule, end: date) -> date:
    return rule.expiration_date if rule.expiration_date is not None else end


def _apply_limit(rule: RecurrenceRule, results: list[date]) -> list[date]:
    limit = rule.occurrence_limit
    if limit is not None and len(results) > limit:
        logger.debug("occurrence limit %d drops %d dates", limit, len(results) - limit)
        return results[:limit]
    return results


def _clip(dates: Iterable[date], lower: date, upper: date) -> list[date]:
    return [d for d in dates if lower <= d <= upper]


def _ordinal_in_month(
    mask: Weekdays, count: int, first: date, lower: date, stop: date
) -> list[date]:
    last = month_end(first)

    if count < 0:
        return _clip(week_matches(mask, add_days(last, -6)), lower, stop)

    week = start_of_week(first)
    seen = 0
    while week <= last and week < stop:
        in_month = _clip(week_matches(mask, week), first, last)
        if in_month:
            seen += 1
            if seen == count:
                return _clip(in_month, lower, stop)
        week = add_days(week, 7)
    return []


# --- Daily ---


def daily_occurrences(
    rule: RecurrenceRule, end: date, options: EvalOptions = DEFAULT_OPTIONS
) -> list[date]:
    stop = _stop(rule, end)
    results: list[date] = []
    cursor = rule.effective_date

    if rule.weekday_mask:
        if options.legacy_daily_weekdays:
            days, step = Weekdays.WEEKDAYS, 1
        else:
            days, step = rule.weekday_mask, rule.step
        while cursor < stop:
            if Weekdays.for_date(cursor) & days:
                results.append(cursor)
            cursor = add_days(cursor, step)
    else:
        while cursor < stop:
            results.append(cursor)
            cursor = add_days(cursor, rule.step)

    return _apply_limit(rule, results)


# --- Weekly ---


def weekly_occurrences(rule: RecurrenceRule, end: date) -> list[date]:
    stop = _stop(rule, end)
    results: list[date] = []
    stride = 7 * rule.step

    if rule.weekday_mask:
        week = start_of_week(rule.effective_date)
        while week < stop:
            results.extend(_clip(week_matches(rule.weekday_mask, week), rule.effective_date, stop))
            week = add_days(week, stride)
    else:
        cursor = rule.effective_date
        while cursor < stop:
            results.append(cursor)
            cursor = add_days(cursor, stride)

    return _apply_limit(rule, results)


# --- Monthly ---


def monthly_occurrences(rule: RecurrenceRule, end: date) -> list[date]:
    stop = _stop(rule, end)

    if rule.use_first_full_work_week:
        results = _monthly_first_full_week(rule, stop)
    elif rule.ordinality is not Ordinality.NONE:
        results = _monthly_ordinal(rule, stop)
    elif rule.day_of_month is not None:
        results = _monthly_fixed_day(rule, rule.day_of_month, stop)
    else:
        logger.debug("monthly rule has no ordinality, day of month or work-week mode")
        results = []

    return _apply_limit(rule, results)


def _monthly_fixed_day(rule: RecurrenceRule, day: int, stop: date) -> list[date]:
    effective = rule.effective_date
    if effective.day <= day:
        candidate = make_date(effective.year, effective.month, day)
    else:
        target = add_months(month_start(effective), rule.step)
        candidate = make_date(target.year, target.month, day)

    # each month steps from the previous date: day 31 settles on 29 after February
    results: list[date] = []
    while candidate < stop:
        results.append(candidate)
        candidate = add_months(candidate, rule.step)
    return results


def _monthly_ordinal(rule: RecurrenceRule, stop: date) -> list[date]:
    if not rule.weekday_mask:
        logger.debug("ordinal monthly rule without a weekday mask yields nothing")
        return []

    count = rule.ordinality.count
    origin = month_start(rule.effective_date)
    results: list[date] = []
    n = 0
    first = origin
    while first < stop:
        results.extend(
            _ordinal_in_month(rule.weekday_mask, count, first, rule.effective_date, stop)
        )
        n += 1
        first = add_months(origin, n * rule.step)
    return results


def _monthly_first_full_week(rule: RecurrenceRule, stop: date) -> list[date]:
    origin = month_start(rule.effective_date)
    results: list[date] = []
    n = 0
    first = origin
    while first <= stop:
        sunday = start_of_week(first)
        if add_days(sunday, 1).month != first.month:
            sunday = add_days(sunday, 7)
        if rule.weekday_mask:
            found = week_matches(rule.weekday_mask, sunday)
        else:
            found = [add_days(sunday, 1)]
        results.extend(_clip(found, rule.effective_date, stop))
        n += 1
        first = add_months(origin, n * rule.step)
    return results


# --- Yearly ---


def yearly_occurrences(rule: RecurrenceRule, end: date) -> list[date]:
    stop = _stop(rule, end)

    if rule.month is None:
        logger.debug("yearly rule without a month yields nothing")
        results: list[date] = []
    elif rule.ordinality is not Ordinality.NONE:
        results = _yearly_ordinal(rule, rule.month, stop)
    elif rule.day_of_month is not None:
        results = _yearly_fixed_day(rule, rule.month, rule.day_of_month, stop)
    else:
        logger.debug("yearly rule has neither ordinality nor day of month")
        results = []

    return _apply_limit(rule, results)


def _yearly_fixed_day(rule: RecurrenceRule, month: int, day: int, stop: date) -> list[date]:
    effective = rule.effective_date
    candidate = make_date(effective.year, month, day)
    if candidate < effective:
        candidate = make_date(effective.year + 1, month, day)

    results: list[date] = []
    while candidate < stop:
        results.append(candidate)
        candidate = add_months(candidate, 12 * rule.step)
    return results


def _yearly_ordinal(rule: RecurrenceRule, month: int, stop: date) -> list[date]:
    if not rule.weekday_mask:
        logger.debug("ordinal yearly rule without a weekday mask yields nothing")
        return []

    count = rule.ordinality.count
    origin = make_date(rule.effective_date.year, month, 1)
    results: list[date] = []
    n = 0
    first = origin
    while first < stop:
        results.extend(
            _ordinal_in_month(rule.weekday_mask, count, first, rule.effective_date, stop)
        )
        n += 1
        first = add_months(origin, 12 * n * rule.step)
    return results


# --- Public API ---


def evaluate_single(
    rule: RecurrenceRule,
    window: DateRange | None = None,
    options: EvalOptions | None = None,
) -> list[date]:
    """Occurrences of ``rule`` inside ``window``, in generation order.

    Without a window the rule's own ``[effective_date, expiration_date]`` is
    used, which requires an expiration date.
    """
    if window is None:
        if rule.expiration_date is None:
            raise RecurError.precondition(
                "rule has no expiration date; pass an explicit window"
            )
        window = DateRange(rule.effective_date, rule.expiration_date)

    if not is_window_valid(rule, window.start, window.end):
        logger.debug("window %s..%s cannot intersect rule", window.start, window.end)
        return []

    opts = options or DEFAULT_OPTIONS
    logger.debug("evaluating %s rule from %s", rule.recurrence_type, rule.effective_date)

    match rule.recurrence_type:
        case RecurrenceType.NON_RECURRING:
            generated = [rule.effective_date]
        case RecurrenceType.DAILY:
            generated = daily_occurrences(rule, window.end, opts)
        case RecurrenceType.WEEKLY:
            generated = weekly_occurrences(rule, window.end)
        case RecurrenceType.MONTHLY:
            generated = monthly_occurrences(rule, window.end)
        case RecurrenceType.YEARLY:
            generated = yearly_occurrences(rule, window.end)

    return trim_to_window(window.start, window.end, generated)


def evaluate_batch(
    rules: Iterable[RecurrenceRule],
    window: DateRange,
    options: EvalOptions | None = None,
) -> list[date]:
    """Concatenate each rule's occurrences in rule order; overlaps stay duplicated."""
    results: list[date] = []
    for rule in rules:
        results.extend(evaluate_single(rule, window, options))
    return results
