"""Range validation for human readable durations."""

from dataclasses import dataclass

from token_server.duration.errors import (
    DefaultMustBeAtLeastOneSecond,
    DurationMustLieBetween,
    MinMustBeAtLeastOneSecond,
    MinMustBeLessOrEqualMax,
    MustBeOrdered,
)
from token_server.duration.human import ONE_SECOND, HumanDuration

DurationLike = HumanDuration | int | str


def as_duration(value: DurationLike) -> HumanDuration:
    """Accept a HumanDuration, a nanosecond count or a human readable string."""
    if isinstance(value, HumanDuration):
        return value
    if isinstance(value, str):
        return HumanDuration.parse(value)
    return HumanDuration(value)


@dataclass(frozen=True)
class DurationRangeValidator:
    """An immutable (min, default, max) range of acceptable durations.

    Build one with ``new`` for trusted literals, or with ``try_new`` and
    ``between`` for values that come from outside. Both check that
    min <= default <= max and that min and default are at least 1s.
    """
    min: HumanDuration
    default: HumanDuration
    max: HumanDuration

    @classmethod
    def new(cls, minimal_nanos: int, default_nanos: int, maximal_nanos: int) -> "DurationRangeValidator":
        """Build a validator from literal nanosecond counts.

        Meant for module-level constants: invalid literals raise while the
        module is imported, so a bad range stops the process at startup.
        """
        return cls.try_new(
            HumanDuration(minimal_nanos),
            HumanDuration(default_nanos),
            HumanDuration(maximal_nanos),
        )

    @classmethod
    def try_new(
        cls,
        minimal: DurationLike,
        default: DurationLike,
        maximal: DurationLike,
    ) -> "DurationRangeValidator":
        """Build a validator from three bounds.

        Raises:
            MustBeOrdered: Unless min <= default <= max.
            MinMustBeAtLeastOneSecond: If min is below 1s.
            DefaultMustBeAtLeastOneSecond: If default is below 1s.
        """
        minimal, default, maximal = as_duration(minimal), as_duration(default), as_duration(maximal)

        if minimal > default or maximal < default:
            raise MustBeOrdered(str(minimal), str(default), str(maximal))

        return cls._checked(minimal, default, maximal)

    @classmethod
    def between(cls, minimal: DurationLike, maximal: DurationLike) -> "DurationRangeValidator":
        """Build a validator whose default is its minimum."""
        minimal, maximal = as_duration(minimal), as_duration(maximal)

        if minimal > maximal:
            raise MinMustBeLessOrEqualMax(str(minimal), str(maximal))

        return cls._checked(minimal, minimal, maximal)

    @classmethod
    def _checked(
        cls,
        minimal: HumanDuration,
        default: HumanDuration,
        maximal: HumanDuration,
    ) -> "DurationRangeValidator":
        if minimal < ONE_SECOND:
            raise MinMustBeAtLeastOneSecond()
        if default < ONE_SECOND:
            raise DefaultMustBeAtLeastOneSecond()
        return cls(min=minimal, default=default, max=maximal)

    def contains(self, duration: HumanDuration) -> bool:
        return self.min <= duration <= self.max

    def parse_and_validate(self, human_readable: str) -> HumanDuration:
        """Parse a duration and check that it lies within this range.

        Raises:
            DurationError: If parsing fails.
            DurationMustLieBetween: If the duration is out of range.
        """
        duration = HumanDuration.parse(human_readable)

        if not self.contains(duration):
            raise DurationMustLieBetween(self.range_text())

        return duration

    def range_text(self) -> str:
        return f"{self.min} and {self.max}"

    def as_nanos(self) -> tuple[int, int, int]:
        return (self.min.nanos, self.default.nanos, self.max.nanos)

    def as_strings(self) -> tuple[str, str, str]:
        return (str(self.min), str(self.default), str(self.max))

    def __str__(self) -> str:
        return f"must be between {self.range_text()}"
