"""Range and option models (Pydantic).

`BoundaryPair` is the contract between the range resolver and the SQL builder: any range handed to
the builder has been validated against these models.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from bystar.temporal.validate import ParseError

DEFAULT_FIELD = "created_at"

IDENTIFIER_RE = re.compile(r"^[a-z_][a-z0-9_]*$", flags=re.IGNORECASE)


class Unit(StrEnum):
    """Supported query granularities."""

    year = "year"
    month = "month"
    fortnight = "fortnight"
    week = "week"
    weekend = "weekend"
    day = "day"
    today = "today"
    yesterday = "yesterday"
    tomorrow = "tomorrow"
    past = "past"
    future = "future"
    between = "between"
    as_of = "as_of"
    up_to = "up_to"


class BoundaryPair(BaseModel):
    """A closed `[start, end]` UTC interval used to filter records."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        """Interpret naive datetimes as UTC and convert aware ones to UTC."""

        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @model_validator(mode="after")
    def validate_order(self) -> BoundaryPair:
        """Validate that the interval is well-formed (`start <= end`)."""

        if self.start > self.end:
            raise ValueError("start must be <= end")
        return self

    def as_tuple(self) -> tuple[datetime, datetime]:
        return self.start, self.end

    def contains(self, moment: datetime) -> bool:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class Duration:
    """A calendar-aware span such as "2 weeks" or "3 months"."""

    count: int
    unit: str

    @property
    def delta(self) -> relativedelta:
        if self.unit == "fortnight":
            return relativedelta(weeks=2 * self.count)
        return relativedelta(**{f"{self.unit}s": self.count})

    def __str__(self) -> str:
        suffix = "" if self.count == 1 else "s"
        return f"{self.count} {self.unit}{suffix}"


class QueryOptions(BaseModel):
    """Per-call finder options."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    field: str = DEFAULT_FIELD
    year: int | None = None

    @field_validator("field")
    @classmethod
    def validate_field(cls, value: str) -> str:
        """Only plain SQL identifiers may name the timestamp column."""

        if not IDENTIFIER_RE.match(value):
            raise ValueError(f"field must be a plain column name, got {value!r}")
        return value


def options_from_kwargs(*, default_field: str = DEFAULT_FIELD, **kwargs: Any) -> QueryOptions:
    """Build `QueryOptions` from finder keyword arguments.

    `None` values are dropped so `field=None` falls back to `default_field`.

    Raises:
        ParseError: If an option is unknown or malformed.
    """

    values = {k: v for k, v in kwargs.items() if v is not None}
    values.setdefault("field", default_field)
    try:
        return QueryOptions.model_validate(values)
    except ValidationError as exc:
        raise ParseError(f"Invalid finder options: {exc}") from exc
