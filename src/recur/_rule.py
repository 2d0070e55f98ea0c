from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, Flag

from ._error import RecurError


class Weekdays(Flag):
    """Bit set over the seven weekdays, Monday first."""

    NONE = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 4
    THURSDAY = 8
    FRIDAY = 16
    SATURDAY = 32
    SUNDAY = 64

    WEEKDAYS = MONDAY | TUESDAY | WEDNESDAY | THURSDAY | FRIDAY
    WEEKEND = SATURDAY | SUNDAY
    ALL = WEEKDAYS | WEEKEND

    @classmethod
    def from_bits(cls, bits: int) -> Weekdays:
        if bits < 0 or bits & ~_ALL_BITS:
            raise RecurError.rule(f"weekday mask {bits:#x} has undefined bits", "weekday_mask")
        return cls(bits)

    @classmethod
    def for_date(cls, d: date) -> Weekdays:
        return _CANONICAL_DAYS[d.weekday()]

    def days(self) -> tuple[Weekdays, ...]:
        """Set members in canonical order (Monday..Sunday)."""
        return tuple(day for day in _CANONICAL_DAYS if day & self)

    def __str__(self) -> str:
        return ", ".join(_DAY_NAMES[day] for day in self.days())


_ALL_BITS = 0x7F

_CANONICAL_DAYS: tuple[Weekdays, ...] = (
    Weekdays.MONDAY,
    Weekdays.TUESDAY,
    Weekdays.WEDNESDAY,
    Weekdays.THURSDAY,
    Weekdays.FRIDAY,
    Weekdays.SATURDAY,
    Weekdays.SUNDAY,
)

_DAY_NAMES: dict[Weekdays, str] = {
    Weekdays.MONDAY: "monday",
    Weekdays.TUESDAY: "tuesday",
    Weekdays.WEDNESDAY: "wednesday",
    Weekdays.THURSDAY: "thursday",
    Weekdays.FRIDAY: "friday",
    Weekdays.SATURDAY: "saturday",
    Weekdays.SUNDAY: "sunday",
}


class RecurrenceType(Enum):
    NON_RECURRING = "non_recurring"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def code(self) -> int:
        return _RECURRENCE_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> RecurrenceType:
        try:
            return _CODE_TO_RECURRENCE[code]
        except KeyError:
            raise RecurError.rule(f"unknown recurrence type code {code}", "recurrence_type") from None

    def __str__(self) -> str:
        return self.value


_RECURRENCE_CODES = {
    RecurrenceType.NON_RECURRING: 0,
    RecurrenceType.DAILY: 1,
    RecurrenceType.WEEKLY: 2,
    RecurrenceType.MONTHLY: 3,
    RecurrenceType.YEARLY: 4,
}

_CODE_TO_RECURRENCE = {v: k for k, v in _RECURRENCE_CODES.items()}


class Ordinality(Enum):
    NONE = "none"
    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    FOURTH = "fourth"
    LAST = "last"

    @property
    def code(self) -> int:
        return _ORDINALITY_CODES[self]

    @property
    def count(self) -> int:
        """Target week count: 1..4 counting forward, -1 for last, 0 for none."""
        return _ORDINALITY_COUNTS[self]

    @classmethod
    def from_code(cls, code: int) -> Ordinality:
        try:
            return _CODE_TO_ORDINALITY[code]
        except KeyError:
            raise RecurError.rule(f"unknown ordinality code {code}", "ordinality") from None

    def __str__(self) -> str:
        return self.value


_ORDINALITY_CODES = {
    Ordinality.NONE: 0,
    Ordinality.FIRST: 1,
    Ordinality.SECOND: 2,
    Ordinality.THIRD: 3,
    Ordinality.FOURTH: 4,
    Ordinality.LAST: 5,
}

_CODE_TO_ORDINALITY = {v: k for k, v in _ORDINALITY_CODES.items()}

_ORDINALITY_COUNTS = {
    Ordinality.NONE: 0,
    Ordinality.FIRST: 1,
    Ordinality.SECOND: 2,
    Ordinality.THIRD: 3,
    Ordinality.FOURTH: 4,
    Ordinality.LAST: -1,
}


# --- Rule ---


@dataclass(frozen=True, slots=True)
class RecurrenceRule:
    """One recurrence pattern, fully populated by the caller.

    ``recurrence_type``, ``ordinality`` and ``weekday_mask`` also accept the
    integer codes used by stored rules; they are normalized to their enum
    members and unknown codes raise :class:`RuleError`.
    """

    effective_date: date
    recurrence_type: RecurrenceType = RecurrenceType.NON_RECURRING
    expiration_date: date | None = None
    weekday_mask: Weekdays = Weekdays.NONE
    ordinality: Ordinality = Ordinality.NONE
    month: int | None = None
    day_of_month: int | None = None
    interval: int | None = None
    occurrence_limit: int | None = None
    use_first_full_work_week: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        _check_date(self.effective_date, "effective_date")
        if self.expiration_date is not None:
            _check_date(self.expiration_date, "expiration_date")
            if self.expiration_date < self.effective_date:
                raise RecurError.rule(
                    f"expiration {self.expiration_date} precedes effective date "
                    f"{self.effective_date}",
                    "expiration_date",
                )

        if not isinstance(self.recurrence_type, RecurrenceType):
            object.__setattr__(
                self, "recurrence_type", RecurrenceType.from_code(self.recurrence_type)
            )
        if not isinstance(self.ordinality, Ordinality):
            object.__setattr__(self, "ordinality", Ordinality.from_code(self.ordinality))
        if not isinstance(self.weekday_mask, Weekdays):
            object.__setattr__(self, "weekday_mask", Weekdays.from_bits(self.weekday_mask))

        if self.interval is not None and self.interval < 0:
            raise RecurError.rule(f"interval must not be negative, got {self.interval}", "interval")
        if self.occurrence_limit is not None and self.occurrence_limit < 1:
            raise RecurError.rule(
                f"occurrence limit must be positive, got {self.occurrence_limit}",
                "occurrence_limit",
            )

    @property
    def step(self) -> int:
        """The interval actually applied: absent or zero means every period."""
        return self.interval or 1

    def has_weekdays(self, days: Weekdays) -> bool:
        return (self.weekday_mask & days) == days

    def with_weekdays(self, *days: Weekdays) -> RecurrenceRule:
        mask = self.weekday_mask
        for day in days:
            mask |= day
        return dataclasses.replace(self, weekday_mask=mask)


def _check_date(value: object, field: str) -> None:
    # datetime subclasses date; this engine works on calendar dates only
    if isinstance(value, datetime) or not isinstance(value, date):
        raise RecurError.rule(f"{field} must be a calendar date, got {value!r}", field)


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive ``[start, end]`` window requested by a caller."""

    start: date
    end: date

    def __contains__(self, d: date) -> bool:
        return self.start <= d <= self.end
