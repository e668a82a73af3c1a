"""Stay date rules.

Rules for a check-in/check-out pair:
- both dates must be given
- check-out must fall strictly after check-in
- check-in must not be before today

Every rule is evaluated, so callers can report all violations at once.
Comparisons happen on calendar days: "now" is truncated to the start of its day.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum

from stayflow.core.exceptions import DateRangeError

MILLISECONDS_PER_DAY = 86_400_000


class DateRule(str, Enum):
    """Date rule identifiers."""

    MISSING_DATES = "missing_dates"
    INVALID_RANGE = "invalid_range"
    PAST_CHECKIN = "past_checkin"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    DateRule.MISSING_DATES: "Please select both check-in and check-out dates.",
    DateRule.INVALID_RANGE: "Check-out date must be after check-in date.",
    DateRule.PAST_CHECKIN: "Check-in date cannot be in the past.",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a date range."""

    violations: tuple[DateRule, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.violations

    def has(self, rule: DateRule) -> bool:
        return rule in self.violations

    def raise_for_violations(self) -> None:
        """Raise DateRangeError carrying every violation, if any."""
        if self.violations:
            raise DateRangeError(list(self.violations))


def to_day(value: date | datetime) -> date:
    """Truncate a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def validate(
    check_in: date | None,
    check_out: date | None,
    now: date | datetime,
) -> ValidationResult:
    """Validate a stay date range against "now".

    Args:
        check_in: Requested check-in date
        check_out: Requested check-out date
        now: Reference instant, truncated to the start of its day

    Returns:
        ValidationResult listing every violated rule
    """
    violations: list[DateRule] = []

    if check_in is None or check_out is None:
        violations.append(DateRule.MISSING_DATES)

    if check_in is not None and check_out is not None and to_day(check_out) <= to_day(check_in):
        violations.append(DateRule.INVALID_RANGE)

    if check_in is not None and to_day(check_in) < to_day(now):
        violations.append(DateRule.PAST_CHECKIN)

    return ValidationResult(violations=tuple(violations))


def nights(check_in: date | datetime, check_out: date | datetime) -> int:
    """Number of nights between check-in and check-out.

    Ceiling division on the millisecond delta, so a stored timestamp skewed by
    a daylight-saving or time-zone offset still counts as a whole night.
    """
    start = check_in if isinstance(check_in, datetime) else datetime.combine(check_in, time())
    end = check_out if isinstance(check_out, datetime) else datetime.combine(check_out, time())
    delta_ms = (end - start).total_seconds() * 1000
    return math.ceil(delta_ms / MILLISECONDS_PER_DAY)
