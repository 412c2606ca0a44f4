"""Domain validation for finder arguments.

Every out-of-domain value is rejected with a `ParseError` whose message is safe to show to the
caller: it names the valid range or the accepted argument types.
"""

from __future__ import annotations

MIN_YEAR = 1902
MAX_YEAR = 2039

MAX_FORTNIGHT_INDEX = 26
MAX_WEEK_INDEX = 53

YEAR_RANGE_MESSAGE = (
    f"Invalid arguments detected, year may possibly be outside of valid range ({MIN_YEAR}-{MAX_YEAR})"
)
MONTH_MESSAGE = (
    "by_month takes only a datetime or date object, an integer (1-12) or a month name "
    "(e.g. 'January' or 'Jan')."
)


class ParseError(ValueError):
    """Raised when a finder argument is out of range or of an unsupported kind."""


def index_message(unit: str, limit: int) -> str:
    """Build the user-facing message for an invalid fortnight/week index."""

    return (
        f"by_{unit} takes only a datetime or date object, an integer (less than or equal to {limit}) "
        "or a parseable string."
    )


_BY_UNITS = frozenset({"year", "month", "fortnight", "week", "weekend", "day"})


def finder_name(unit: str) -> str:
    """Name of the public finder for `unit`: `by_week` for calendar units, `today` for the rest."""

    return f"by_{unit}" if unit in _BY_UNITS else unit


def unsupported_message(unit: str, accepted: str) -> str:
    return f"{finder_name(unit)} takes only {accepted}."


def validate_year(year: int) -> int:
    """Validate that `year` is within the supported span (1902-2039 inclusive)."""

    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ParseError(YEAR_RANGE_MESSAGE)
    return year


def validate_month(month: int) -> int:
    """Validate a month number (1-12)."""

    if not 1 <= month <= 12:
        raise ParseError(MONTH_MESSAGE)
    return month


def validate_fortnight(index: int) -> int:
    """Validate a zero-based fortnight index within a year (0-26)."""

    if not 0 <= index <= MAX_FORTNIGHT_INDEX:
        raise ParseError(index_message("fortnight", MAX_FORTNIGHT_INDEX))
    return index


def validate_week(index: int) -> int:
    """Validate a zero-based week index within a year (0-53)."""

    if not 0 <= index <= MAX_WEEK_INDEX:
        raise ParseError(index_message("week", MAX_WEEK_INDEX))
    return index
