from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from ._rule import RecurrenceRule


def is_window_valid(rule: RecurrenceRule, start: date, end: date) -> bool:
    """Whether ``[start, end]`` can intersect the rule's effective/expiration span."""
    if start > end:
        return False
    if rule.expiration_date is not None and start >= rule.expiration_date:
        return False
    return end > rule.effective_date


def trim_to_window(start: date, end: date, dates: Iterable[date]) -> list[date]:
    return [d for d in dates if start <= d <= end]
