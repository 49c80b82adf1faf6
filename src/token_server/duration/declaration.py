"""Declare duration ranges from literal blocks.

A declaration names ``min``, ``max`` and optionally ``default``::

    LIFETIME_RANGE = declare_range("{default: 2h, min: 1500ms, max: 60day}")

When ``default`` is left out it falls back to ``min``.
"""

from collections.abc import Mapping

from token_server.duration.errors import (
    InvalidSyntax,
    MaxMustBeSpecified,
    MinMustBeSpecified,
    UnknownRangeArgument,
)
from token_server.duration.human import HumanDuration
from token_server.duration.validator import DurationRangeValidator

RANGE_ARGUMENTS = ("min", "default", "max")


def parse_declaration(text: str) -> dict[str, str]:
    """Split ``{name: duration, ...}`` into a name to duration text mapping."""
    body = text.strip()
    if body.startswith("{") and body.endswith("}"):
        body = body[1:-1]

    arguments = {}
    for entry in body.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, value = entry.partition(":")
        if not sep:
            raise InvalidSyntax()
        arguments[name.strip()] = value.strip()

    return arguments


def declare_range(declaration: str | Mapping[str, str]) -> DurationRangeValidator:
    """Build a validator from a literal block or a mapping.

    Raises:
        UnknownRangeArgument: For names other than min, default and max.
        MinMustBeSpecified: If min is missing.
        MaxMustBeSpecified: If max is missing.
        DurationError: If a bound does not parse or the range is invalid.
    """
    if isinstance(declaration, str):
        arguments = parse_declaration(declaration)
    else:
        arguments = {str(k): str(v) for k, v in declaration.items()}

    durations = {}
    for name, value in arguments.items():
        if name not in RANGE_ARGUMENTS:
            raise UnknownRangeArgument(name)
        durations[name] = HumanDuration.parse(value)

    if "min" not in durations:
        raise MinMustBeSpecified()
    if "max" not in durations:
        raise MaxMustBeSpecified()

    if "default" not in durations:
        return DurationRangeValidator.between(durations["min"], durations["max"])

    return DurationRangeValidator.try_new(
        durations["min"], durations["default"], durations["max"]
    )
