"""Argument normalization for time-scoped finders.

Finder arguments arrive loosely typed. This module classifies them into a tagged `Argument` so the
range resolver can dispatch on an explicit kind instead of probing Python types everywhere.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal
from enum import StrEnum
from typing import Any

from bystar.temporal.validate import ParseError


class ArgumentKind(StrEnum):
    """Supported argument kinds."""

    empty = "empty"
    integer = "integer"
    decimal = "decimal"
    text = "text"
    date = "date"
    datetime = "datetime"


@dataclass(frozen=True)
class Argument:
    """A finder argument tagged with its kind."""

    kind: ArgumentKind
    value: Any = None

    @property
    def is_empty(self) -> bool:
        return self.kind == ArgumentKind.empty

    @property
    def is_numeric(self) -> bool:
        return self.kind in {ArgumentKind.integer, ArgumentKind.decimal}

    @property
    def is_temporal(self) -> bool:
        return self.kind in {ArgumentKind.date, ArgumentKind.datetime}

    def as_int(self) -> int:
        """Return the numeric value truncated toward zero."""

        if self.kind == ArgumentKind.integer:
            return self.value
        if self.kind == ArgumentKind.decimal:
            return int(self.value)
        raise ParseError(f"Expected a number, got {self.kind} argument")

    def as_anchor(self) -> datetime:
        """Return the date/datetime value as an aware UTC anchor."""

        if not self.is_temporal:
            raise ParseError(f"Expected a date or datetime, got {self.kind} argument")
        return to_anchor(self.value)


def to_anchor(value: date | datetime) -> datetime:
    """Convert a date or datetime into an aware UTC datetime.

    A bare `date` becomes midnight UTC of that day; a naive `datetime` is interpreted as UTC.
    """

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    return datetime.combine(value, time.min, tzinfo=UTC)


def normalize_argument(value: Any) -> Argument:
    """Classify a raw finder argument.

    Raises:
        ParseError: If the value is of an unsupported type (lists, booleans, arbitrary objects) or
            is a non-finite number.
    """

    if value is None:
        return Argument(ArgumentKind.empty)
    if isinstance(value, Argument):
        return value
    # `bool` is a subclass of `int`; `True` is never a meaningful year/month/index.
    if isinstance(value, bool):
        raise ParseError(f"Unsupported argument type: {type(value).__name__}")
    if isinstance(value, int):
        return Argument(ArgumentKind.integer, value)
    if isinstance(value, (float, Decimal)):
        if not math.isfinite(value):
            raise ParseError(f"Unsupported numeric argument: {value}")
        return Argument(ArgumentKind.decimal, value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return Argument(ArgumentKind.empty)
        return Argument(ArgumentKind.text, text)
    # Check `datetime` first: it is a subclass of `date`.
    if isinstance(value, datetime):
        return Argument(ArgumentKind.datetime, value)
    if isinstance(value, date):
        return Argument(ArgumentKind.date, value)

    raise ParseError(f"Unsupported argument type: {type(value).__name__}")
