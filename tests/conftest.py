from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from recur import RecurrenceRule

RuleFactory = Callable[..., RecurrenceRule]


def iso(s: str) -> date:
    """Parse '2024-01-09' into a date."""
    return date.fromisoformat(s)


@pytest.fixture
def make_rule() -> RuleFactory:
    """Build a rule effective 2024-01-01, overriding any field by keyword.

    Date fields may be given as ISO strings.
    """

    def factory(**fields: Any) -> RecurrenceRule:
        fields.setdefault("effective_date", date(2024, 1, 1))
        for name in ("effective_date", "expiration_date"):
            if isinstance(fields.get(name), str):
                fields[name] = iso(fields[name])
        return RecurrenceRule(**fields)

    return factory
