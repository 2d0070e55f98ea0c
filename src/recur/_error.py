from __future__ import annotations

from typing import Literal

RecurErrorKind = Literal["rule", "precondition", "calendar"]


class RecurError(Exception):
    kind: RecurErrorKind
    field: str | None

    def __init__(self, kind: RecurErrorKind, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field

    @classmethod
    def rule(cls, message: str, field: str | None = None) -> RecurError:
        return RuleError(message, field)

    @classmethod
    def precondition(cls, message: str) -> RecurError:
        return PreconditionError(message)

    @classmethod
    def calendar(cls, message: str) -> RecurError:
        return CalendarArithmeticError(message)


class RuleError(RecurError):
    """A rule value that cannot be constructed (bad code, bad bound, bad mask)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__("rule", message, field)


class PreconditionError(RecurError):
    """The caller omitted something the requested operation needs."""

    def __init__(self, message: str) -> None:
        super().__init__("precondition", message)


class CalendarArithmeticError(RecurError):
    """A date that does not exist, or stepping past the representable range."""

    def __init__(self, message: str) -> None:
        super().__init__("calendar", message)
