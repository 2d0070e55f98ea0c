from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EvalOptions:
    """Evaluation switches, passed explicitly to every entry point.

    ``legacy_daily_weekdays`` keeps the stored-rule behavior of daily rules
    with a weekday mask: every Monday to Friday, whatever the mask holds,
    with the interval ignored. Turn it off to filter by the rule's own mask
    and step by its interval.
    """

    legacy_daily_weekdays: bool = True


DEFAULT_OPTIONS = EvalOptions()
