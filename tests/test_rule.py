"""Rule construction: code normalization, validation, and the weekday set helpers."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime

import pytest

from recur import (
    DateRange,
    Ordinality,
    RecurError,
    RecurrenceRule,
    RecurrenceType,
    RuleError,
    Weekdays,
)

# =============================================================================
# Weekdays
# =============================================================================


class TestWeekdays:
    def test_days_in_canonical_order(self) -> None:
        mask = Weekdays.SUNDAY | Weekdays.WEDNESDAY | Weekdays.MONDAY
        assert mask.days() == (Weekdays.MONDAY, Weekdays.WEDNESDAY, Weekdays.SUNDAY)

    def test_str(self) -> None:
        assert str(Weekdays.FRIDAY | Weekdays.MONDAY) == "monday, friday"

    def test_aliases(self) -> None:
        assert len(Weekdays.WEEKDAYS.days()) == 5
        assert Weekdays.WEEKEND.days() == (Weekdays.SATURDAY, Weekdays.SUNDAY)
        assert Weekdays.ALL == Weekdays.WEEKDAYS | Weekdays.WEEKEND
        assert not Weekdays.NONE

    def test_from_bits(self) -> None:
        assert Weekdays.from_bits(0b0010001) == Weekdays.MONDAY | Weekdays.FRIDAY
        assert Weekdays.from_bits(0) == Weekdays.NONE

    @pytest.mark.parametrize("bits", [128, 0xFF, -1])
    def test_from_bits_rejects_undefined(self, bits: int) -> None:
        with pytest.raises(RuleError):
            Weekdays.from_bits(bits)

    def test_for_date(self) -> None:
        assert Weekdays.for_date(date(2024, 1, 1)) == Weekdays.MONDAY
        assert Weekdays.for_date(date(2024, 1, 7)) == Weekdays.SUNDAY


# =============================================================================
# Enum codes
# =============================================================================


class TestCodes:
    def test_recurrence_round_trip(self) -> None:
        for kind in RecurrenceType:
            assert RecurrenceType.from_code(kind.code) is kind

    def test_ordinality_counts(self) -> None:
        counts = [o.count for o in Ordinality]
        assert counts == [0, 1, 2, 3, 4, -1]

    def test_unknown_recurrence_code(self) -> None:
        with pytest.raises(RuleError) as exc:
            RecurrenceType.from_code(7)
        assert exc.value.kind == "rule"
        assert exc.value.field == "recurrence_type"

    def test_unknown_ordinality_code(self) -> None:
        with pytest.raises(RuleError) as exc:
            Ordinality.from_code(-1)
        assert exc.value.field == "ordinality"


# =============================================================================
# Rule construction
# =============================================================================


class TestRuleConstruction:
    def test_integer_codes_are_normalized(self) -> None:
        rule = RecurrenceRule(
            effective_date=date(2024, 1, 1),
            recurrence_type=3,  # type: ignore[arg-type]
            ordinality=5,  # type: ignore[arg-type]
            weekday_mask=16,  # type: ignore[arg-type]
        )
        assert rule.recurrence_type is RecurrenceType.MONTHLY
        assert rule.ordinality is Ordinality.LAST
        assert rule.weekday_mask == Weekdays.FRIDAY

    def test_invalid_code_fails_construction(self) -> None:
        with pytest.raises(RuleError):
            RecurrenceRule(effective_date=date(2024, 1, 1), recurrence_type=9)  # type: ignore[arg-type]

    def test_invalid_mask_fails_construction(self) -> None:
        with pytest.raises(RuleError):
            RecurrenceRule(effective_date=date(2024, 1, 1), weekday_mask=0x80)  # type: ignore[arg-type]

    def test_expiration_before_effective(self) -> None:
        with pytest.raises(RuleError) as exc:
            RecurrenceRule(effective_date=date(2024, 2, 1), expiration_date=date(2024, 1, 1))
        assert exc.value.field == "expiration_date"

    def test_expiration_equal_to_effective_is_allowed(self) -> None:
        rule = RecurrenceRule(effective_date=date(2024, 2, 1), expiration_date=date(2024, 2, 1))
        assert rule.expiration_date == rule.effective_date

    def test_datetime_is_rejected(self) -> None:
        with pytest.raises(RuleError):
            RecurrenceRule(effective_date=datetime(2024, 1, 1, 9, 0))

    def test_negative_interval(self) -> None:
        with pytest.raises(RuleError):
            RecurrenceRule(effective_date=date(2024, 1, 1), interval=-2)

    @pytest.mark.parametrize("interval,step", [(None, 1), (0, 1), (1, 1), (3, 3)])
    def test_step(self, interval: int | None, step: int) -> None:
        assert RecurrenceRule(effective_date=date(2024, 1, 1), interval=interval).step == step

    def test_occurrence_limit_must_be_positive(self) -> None:
        with pytest.raises(RuleError):
            RecurrenceRule(effective_date=date(2024, 1, 1), occurrence_limit=0)

    def test_rule_error_is_recur_error(self) -> None:
        with pytest.raises(RecurError):
            RecurrenceRule(effective_date=date(2024, 1, 1), occurrence_limit=-1)

    def test_frozen(self) -> None:
        rule = RecurrenceRule(effective_date=date(2024, 1, 1))
        with pytest.raises(dataclasses.FrozenInstanceError):
            rule.interval = 2  # type: ignore[misc]


class TestWeekdayHelpers:
    def test_with_weekdays_returns_new_rule(self) -> None:
        rule = RecurrenceRule(effective_date=date(2024, 1, 1), weekday_mask=Weekdays.MONDAY)
        widened = rule.with_weekdays(Weekdays.WEDNESDAY, Weekdays.FRIDAY)

        assert widened.weekday_mask == Weekdays.MONDAY | Weekdays.WEDNESDAY | Weekdays.FRIDAY
        assert rule.weekday_mask == Weekdays.MONDAY
        assert widened.effective_date == rule.effective_date

    def test_has_weekdays(self) -> None:
        rule = RecurrenceRule(effective_date=date(2024, 1, 1), weekday_mask=Weekdays.WEEKDAYS)
        assert rule.has_weekdays(Weekdays.TUESDAY)
        assert rule.has_weekdays(Weekdays.MONDAY | Weekdays.FRIDAY)
        assert not rule.has_weekdays(Weekdays.TUESDAY | Weekdays.SUNDAY)


def test_date_range_contains() -> None:
    window = DateRange(date(2024, 1, 1), date(2024, 1, 31))
    assert date(2024, 1, 1) in window
    assert date(2024, 1, 31) in window
    assert date(2024, 2, 1) not in window
