"""Unit table shared by duration parsing and formatting.

Months and years are fixed-length: a month is 30 days, a year 365 days.
"""

from dataclasses import dataclass

U64_MAX = 2**64 - 1

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY
YEAR = 365 * DAY
CENTURY = 100 * YEAR


@dataclass(frozen=True)
class Unit:
    """A unit of time with its rendering suffixes."""
    nanos: int
    singular: str
    plural: str

    def suffix(self, count: int) -> str:
        return self.plural if count > 1 else self.singular


# Largest first; formatting walks this in order.
UNITS: tuple[Unit, ...] = (
    Unit(CENTURY, " century", " centuries"),
    Unit(YEAR, " year", " years"),
    Unit(MONTH, " month", " months"),
    Unit(WEEK, " week", " weeks"),
    Unit(DAY, " day", " days"),
    Unit(HOUR, "h", "h"),
    Unit(MINUTE, "min", "min"),
    Unit(SECOND, "s", "s"),
    Unit(MILLISECOND, "ms", "ms"),
    Unit(MICROSECOND, "μs", "μs"),
    Unit(NANOSECOND, "ns", "ns"),
)

MULTIPLIERS: dict[str, int] = {
    "century": CENTURY,
    "centuries": CENTURY,
    "year": YEAR,
    "years": YEAR,
    "month": MONTH,
    "months": MONTH,
    "week": WEEK,
    "weeks": WEEK,
    "day": DAY,
    "days": DAY,
    "h": HOUR,
    "min": MINUTE,
    "s": SECOND,
    "ms": MILLISECOND,
    "μs": MICROSECOND,
    "ns": NANOSECOND,
}
