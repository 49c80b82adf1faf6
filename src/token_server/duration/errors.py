"""Errors raised while parsing or validating durations."""


class DurationError(ValueError):
    """Base class for duration parsing and validation failures.

    Every subclass has a stable ``code`` for use in API error bodies.
    """
    code = "DURATION_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidSyntax(DurationError):
    code = "INVALID_SYNTAX"

    def __init__(self):
        super().__init__(
            "Duration must be specified as a positive integer, immediately "
            "followed by centuries, years, months, weeks, days, h, min, s, ms, μs or ns"
        )


class InvalidValue(DurationError):
    code = "INVALID_VALUE"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid duration value: {value}")


class UnsupportedSymbol(DurationError):
    code = "UNSUPPORTED_SYMBOL"

    def __init__(self, sym: str):
        self.sym = sym
        super().__init__(f"'{sym}' is not supported as a duration symbol")


class IntegerOverflowAt(DurationError):
    code = "INTEGER_OVERFLOW"

    def __init__(self, duration: str):
        self.duration = duration
        super().__init__(f"Duration overflows at '{duration}'")


class DurationMustLieBetween(DurationError):
    code = "OUT_OF_RANGE"

    def __init__(self, bounds: str):
        self.range = bounds
        super().__init__(f"Duration must lie between {bounds}")


class MinMustBeLessOrEqualMax(DurationError):
    code = "MIN_GREATER_THAN_MAX"

    def __init__(self, minimal: str, maximal: str):
        self.minimal = minimal
        self.maximal = maximal
        super().__init__(f"Invalid range: should be {minimal} <= {maximal}")


class MustBeOrdered(DurationError):
    code = "RANGE_NOT_ORDERED"

    def __init__(self, minimal: str, default: str, maximal: str):
        self.minimal = minimal
        self.default = default
        self.maximal = maximal
        super().__init__(f"Invalid range: should be {minimal} <= {default} <= {maximal}")


class MinMustBeSpecified(DurationError):
    code = "MIN_NOT_SPECIFIED"

    def __init__(self):
        super().__init__("could not find min duration")


class MaxMustBeSpecified(DurationError):
    code = "MAX_NOT_SPECIFIED"

    def __init__(self):
        super().__init__("could not find max duration")


class MinMustBeAtLeastOneSecond(DurationError):
    code = "MIN_BELOW_ONE_SECOND"

    def __init__(self):
        super().__init__("min duration must be 1s or longer")


class DefaultMustBeAtLeastOneSecond(DurationError):
    code = "DEFAULT_BELOW_ONE_SECOND"

    def __init__(self):
        super().__init__("default duration must be 1s or longer")


class UnknownRangeArgument(DurationError):
    code = "UNKNOWN_RANGE_ARGUMENT"

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"duration argument '{name}' not recognized, use min, max and default"
        )
