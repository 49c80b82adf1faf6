"""Durations in human readable form, with nanosecond precision."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from token_server.duration.errors import (
    IntegerOverflowAt,
    InvalidSyntax,
    InvalidValue,
    UnsupportedSymbol,
)
from token_server.duration.units import (
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    MULTIPLIERS,
    SECOND,
    U64_MAX,
    UNITS,
)

if TYPE_CHECKING:
    from token_server.duration.validator import DurationRangeValidator

__all__ = [
    "HumanDuration",
    "DEFAULT_DURATION",
    "ONE_SECOND",
    "ONE_MILLISECOND",
]

# One grammar for both detection and extraction. Anything between tokens is
# ignored, so expanded output like "2 years 1 week" parses back.
TOKEN_PATTERN = re.compile(
    r"(?P<value>[0-9]+)\s*"
    r"(?P<unit>centuries|century|years?|months?|weeks?|days?|h|min|ms|μs|ns|s)"
)


@dataclass(frozen=True, order=True)
class HumanDuration:
    """An immutable duration, stored as an unsigned 64-bit nanosecond count.

    ``str()`` gives the compact form: the largest unit that divides the
    duration exactly. ``format(duration, "#")`` gives the expanded form:
    every nonzero unit, largest first.

    >>> duration = HumanDuration.parse("80h")
    >>> str(duration)
    '80h'
    >>> format(duration, "#")
    '3 days 8h'
    """
    nanos: int

    def __post_init__(self):
        if isinstance(self.nanos, bool) or not isinstance(self.nanos, int):
            raise TypeError(f"nanos must be an int, not {type(self.nanos).__name__}")
        if not 0 <= self.nanos <= U64_MAX:
            raise InvalidValue(str(self.nanos))

    @classmethod
    def parse(cls, human_readable: str) -> "HumanDuration":
        """Parse every ``<digits><unit>`` token in the text and sum them.

        Raises:
            InvalidSyntax: If the text holds no token at all.
            InvalidValue: If a token's number does not fit 64 bits.
            IntegerOverflowAt: If a token, or the running sum, overflows.
        """
        total = 0
        matched = False

        for match in TOKEN_PATTERN.finditer(human_readable):
            matched = True
            total = _add_token(total, match)

        if not matched:
            raise InvalidSyntax()

        return cls(total)

    @classmethod
    def from_millis(cls, millis: int) -> "HumanDuration":
        return cls(millis * MILLISECOND)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "HumanDuration":
        seconds = delta.days * 86_400 + delta.seconds
        return cls(seconds * SECOND + delta.microseconds * MICROSECOND)

    def to_timedelta(self) -> timedelta:
        """Convert to a timedelta, truncating below microseconds."""
        return timedelta(microseconds=self.nanos // MICROSECOND)

    def total_seconds(self) -> float:
        return self.nanos / SECOND

    def is_in(self, validator: "DurationRangeValidator") -> bool:
        return validator.contains(self)

    def to_string(self, expanded: bool = False) -> str:
        """Render in compact form, or in expanded form when asked."""
        if expanded:
            return _expanded(self.nanos)
        return _compact(self.nanos)

    def __str__(self) -> str:
        return _compact(self.nanos)

    def __format__(self, format_spec: str) -> str:
        if format_spec.startswith("#"):
            return format(_expanded(self.nanos), format_spec[1:])
        return format(_compact(self.nanos), format_spec)

    def __add__(self, other):
        if isinstance(other, datetime):
            return other + self.to_timedelta()
        return NotImplemented

    __radd__ = __add__


def _add_token(total: int, match: re.Match) -> int:
    """Add one matched token to the running nanosecond total."""
    token = match.group(0)
    digits = match.group("value")
    unit = match.group("unit")

    # u64 max has 20 digits; longer strings never reach int()
    significant = digits.lstrip("0") or "0"
    if len(significant) > 20:
        raise InvalidValue(digits)

    value = int(significant)
    if value > U64_MAX:
        raise InvalidValue(digits)

    if value == 0:
        return total

    factor = MULTIPLIERS.get(unit)
    if factor is None:
        raise UnsupportedSymbol(unit)

    if value > U64_MAX // factor:
        raise IntegerOverflowAt(token)

    part = value * factor
    if part > U64_MAX - total:
        raise IntegerOverflowAt(token)

    return total + part


def _compact(nanos: int) -> str:
    if nanos == 0:
        return "0ns"

    # Nanoseconds divide everything, so this always finds a unit
    unit = next(u for u in UNITS if nanos % u.nanos == 0)
    count = nanos // unit.nanos
    return f"{count}{unit.suffix(count)}"


def _expanded(nanos: int) -> str:
    parts = []
    for unit in UNITS:
        count, nanos = divmod(nanos, unit.nanos)
        if count > 0:
            parts.append(f"{count}{unit.suffix(count)}")
    return " ".join(parts)


ONE_SECOND = HumanDuration(SECOND)
ONE_MILLISECOND = HumanDuration(MILLISECOND)
DEFAULT_DURATION = HumanDuration(MINUTE)
