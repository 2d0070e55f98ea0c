from __future__ import annotations

from datetime import MAXYEAR, MINYEAR, date

from ._calendar import add_days, add_months, start_of_week, week_matches
from ._display import describe
from ._error import (
    CalendarArithmeticError,
    PreconditionError,
    RecurError,
    RecurErrorKind,
    RuleError,
)
from ._eval import (
    daily_occurrences,
    evaluate_batch,
    evaluate_single,
    monthly_occurrences,
    weekly_occurrences,
    yearly_occurrences,
)
from ._options import EvalOptions
from ._rule import DateRange, Ordinality, RecurrenceRule, RecurrenceType, Weekdays
from ._window import is_window_valid, trim_to_window

# Growing search spans (in years) used by next_n_from before giving up.
_SEARCH_SPANS = (1, 2, 4, 8, 16, 32, 64)


class Schedule:
    _rule: RecurrenceRule
    _options: EvalOptions | None

    def __init__(self, rule: RecurrenceRule, options: EvalOptions | None = None) -> None:
        self._rule = rule
        self._options = options

    def occurrences(self) -> list[date]:
        """All occurrences between the rule's effective and expiration dates.

        Raises `PreconditionError` when the rule has no expiration date.
        """
        return evaluate_single(self._rule, options=self._options)

    def between(self, start: date, end: date) -> list[date]:
        """Occurrences where `start <= occurrence <= end`."""
        return evaluate_single(self._rule, DateRange(start, end), self._options)

    def next_n_from(self, start: date, n: int) -> list[date]:
        """The first `n` occurrences on or after `start`.

        Searches windows of 1, 2, 4, ... 64 years from `start`, never past the
        rule's expiration date or the last year its steps can reach. Returns
        fewer than `n` dates when the rule runs out within that horizon.
        """
        if n <= 0:
            return []

        effective = self._rule.effective_date
        expiration = self._rule.expiration_date
        horizon = _search_horizon(self._rule)
        found: list[date] = []
        for years in _SEARCH_SPANS:
            end = _search_end(start, years, horizon)
            if expiration is not None and end >= expiration:
                end = expiration
            # evaluate from the effective date so windows agree with occurrences()
            found = [d for d in self.between(effective, end) if d >= start]
            if len(found) >= n or end == expiration or end == horizon:
                break
        return found[:n]

    def next_from(self, start: date) -> date | None:
        found = self.next_n_from(start, 1)
        return found[0] if found else None

    def matches(self, d: date) -> bool:
        if d < self._rule.effective_date:
            return False
        return d in self.between(self._rule.effective_date, add_days(d, 1))

    @property
    def rule(self) -> RecurrenceRule:
        return self._rule

    @property
    def options(self) -> EvalOptions | None:
        return self._options

    def __str__(self) -> str:
        return describe(self._rule)

    def __repr__(self) -> str:
        return f"Schedule({describe(self._rule)!r})"


def _search_horizon(rule: RecurrenceRule) -> date:
    """Last date a search window may reach without the rule stepping past date.max."""
    step = rule.step
    match rule.recurrence_type:
        case RecurrenceType.NON_RECURRING:
            margin = 0
        case RecurrenceType.DAILY:
            margin = step // 365 + 1
        case RecurrenceType.WEEKLY:
            margin = 7 * step // 365 + 1
        case RecurrenceType.MONTHLY:
            margin = step // 12 + 1
        case RecurrenceType.YEARLY:
            margin = step + 1
    return date(max(MINYEAR, MAXYEAR - margin), 12, 31)


def _search_end(start: date, years: int, horizon: date) -> date:
    if start.year + years >= horizon.year:
        return horizon
    return add_months(start, 12 * years)


__all__ = [
    "Schedule",
    "RecurrenceRule",
    "RecurrenceType",
    "Ordinality",
    "Weekdays",
    "DateRange",
    "EvalOptions",
    "RecurError",
    "RecurErrorKind",
    "RuleError",
    "PreconditionError",
    "CalendarArithmeticError",
    "evaluate_single",
    "evaluate_batch",
    "is_window_valid",
    "trim_to_window",
    "daily_occurrences",
    "weekly_occurrences",
    "monthly_occurrences",
    "yearly_occurrences",
    "start_of_week",
    "week_matches",
    "describe",
]
