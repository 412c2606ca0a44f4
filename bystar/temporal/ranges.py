"""Range resolution for time-scoped finders (UTC calendar).

All ranges are closed UTC intervals:
    - a calendar day: [day 00:00:00, day 23:59:59.999999]
    - a year/month/block of days: [first day 00:00:00, last day 23:59:59.999999]

"Now" is never read from the process clock here; it is passed in by the caller, which keeps every
resolution deterministic for a given input.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from dateutil.relativedelta import relativedelta

from bystar.temporal import relative
from bystar.temporal.dictionaries import month_from_name
from bystar.temporal.normalize import Argument, ArgumentKind, normalize_argument
from bystar.temporal.schema import BoundaryPair, Duration, Unit
from bystar.temporal.validate import (
    MONTH_MESSAGE,
    ParseError,
    unsupported_message,
    validate_fortnight,
    validate_month,
    validate_week,
    validate_year,
)

PAST_FLOOR = datetime(1, 1, 1, tzinfo=UTC)
FUTURE_CEILING = datetime(9999, 12, 31, 23, 59, 59, 999999, tzinfo=UTC)

_ANCHOR_TYPES = "a datetime or date object or a parseable string"

Span = Duration | timedelta | relativedelta


def utc_now() -> datetime:
    """Default clock: the current aware UTC datetime."""

    return datetime.now(UTC)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=UTC)


def day_pair(first: date, last: date | None = None) -> BoundaryPair:
    """Build the closed interval covering the calendar days `first..last` (inclusive)."""

    return BoundaryPair(start=start_of_day(first), end=end_of_day(last or first))


def _block_pair(year: int, index: int, length: int) -> BoundaryPair:
    """Return the `index`-th block of `length` days counted from Jan 1, clamped to the year."""

    year_end = date(year, 12, 31)
    first = min(date(year, 1, 1) + timedelta(days=length * index), year_end)
    last = min(first + timedelta(days=length - 1), year_end)
    return day_pair(first, last)


def _block_index(moment: datetime, length: int) -> int:
    return (moment.timetuple().tm_yday - 1) // length


def _as_delta(span: Span) -> timedelta | relativedelta:
    if isinstance(span, Duration):
        return span.delta
    return span


@dataclass(frozen=True)
class RangeResolver:
    """Resolve finder arguments into `BoundaryPair`s relative to a fixed `now`."""

    now: datetime
    languages: Sequence[str] = relative.DEFAULT_LANGUAGES

    def __post_init__(self) -> None:
        if self.now.tzinfo is None:
            object.__setattr__(self, "now", self.now.replace(tzinfo=UTC))

    def resolve_phrase(self, phrase: str) -> datetime:
        return relative.resolve_phrase(phrase, now=self.now, languages=self.languages)

    def anchor(self, value: Any, *, unit: Unit | str) -> datetime:
        """Resolve a single point in time; empty arguments mean "now"."""

        arg = normalize_argument(value)
        if arg.is_empty:
            return self.now
        if arg.is_temporal:
            return arg.as_anchor()
        if arg.kind == ArgumentKind.text:
            return self.resolve_phrase(arg.value)
        raise ParseError(unsupported_message(str(unit), _ANCHOR_TYPES))

    def _year_option(self, year: int | None, default: int) -> int:
        return validate_year(default if year is None else year)

    def year(self, value: Any = None) -> BoundaryPair:
        arg = normalize_argument(value)
        if arg.is_empty:
            year = self.now.year
        elif arg.is_numeric:
            year = arg.as_int()
        elif arg.kind == ArgumentKind.text and arg.value.isdecimal():
            year = int(arg.value)
        else:
            year = self.anchor(arg, unit=Unit.year).year

        year = validate_year(year)
        return day_pair(date(year, 1, 1), date(year, 12, 31))

    def _month_and_year(self, arg: Argument) -> tuple[int, int | None]:
        if arg.is_empty:
            return self.now.month, None
        if arg.is_numeric:
            return arg.as_int(), None
        if arg.is_temporal:
            moment = arg.as_anchor()
            return moment.month, moment.year

        month = month_from_name(arg.value)
        if month is not None:
            return month, None
        if arg.value.isdecimal():
            return int(arg.value), None
        try:
            moment = self.resolve_phrase(arg.value)
        except relative.RelativeParseError as exc:
            raise ParseError(MONTH_MESSAGE) from exc
        return moment.month, moment.year

    def month(self, value: Any = None, *, year: int | None = None) -> BoundaryPair:
        month, anchor_year = self._month_and_year(normalize_argument(value))
        month = validate_month(month)
        resolved_year = self._year_option(year, anchor_year or self.now.year)

        last_day = calendar.monthrange(resolved_year, month)[1]
        return day_pair(date(resolved_year, month, 1), date(resolved_year, month, last_day))

    def _indexed_block(
            self,
            value: Any,
            *,
            year: int | None,
            unit: Unit,
            length: int,
            validate: Callable[[int], int],
    ) -> BoundaryPair:
        arg = normalize_argument(value)
        if arg.is_numeric:
            index = validate(arg.as_int())
            resolved_year = self._year_option(year, self.now.year)
        elif arg.kind == ArgumentKind.text and arg.value.isdecimal():
            index = validate(int(arg.value))
            resolved_year = self._year_option(year, self.now.year)
        else:
            moment = self.anchor(arg, unit=unit)
            index = _block_index(moment, length)
            resolved_year = self._year_option(year, moment.year)
        return _block_pair(resolved_year, index, length)

    def fortnight(self, value: Any = None, *, year: int | None = None) -> BoundaryPair:
        return self._indexed_block(
            value, year=year, unit=Unit.fortnight, length=14, validate=validate_fortnight
        )

    def week(self, value: Any = None, *, year: int | None = None) -> BoundaryPair:
        return self._indexed_block(
            value, year=year, unit=Unit.week, length=7, validate=validate_week
        )

    def weekend(self, value: Any = None) -> BoundaryPair:
        day = self.anchor(value, unit=Unit.weekend).date()
        saturday = day - timedelta(days=day.weekday()) + timedelta(days=5)
        return day_pair(saturday, saturday + timedelta(days=1))

    def day(self, value: Any = None) -> BoundaryPair:
        return day_pair(self.anchor(value, unit=Unit.day).date())

    def today(self, value: Any = None) -> BoundaryPair:
        return day_pair(self.anchor(value, unit=Unit.today).date())

    def yesterday(self, value: Any = None) -> BoundaryPair:
        return day_pair(self.anchor(value, unit=Unit.yesterday).date() - timedelta(days=1))

    def tomorrow(self, value: Any = None) -> BoundaryPair:
        return day_pair(self.anchor(value, unit=Unit.tomorrow).date() + timedelta(days=1))

    def past(self, value: Any = None) -> BoundaryPair:
        return BoundaryPair(start=PAST_FLOOR, end=self.anchor(value, unit=Unit.past))

    def future(self, value: Any = None) -> BoundaryPair:
        return BoundaryPair(start=self.anchor(value, unit=Unit.future), end=FUTURE_CEILING)

    def between(self, first: Any, second: Any) -> BoundaryPair:
        a = self.anchor(first, unit=Unit.between)
        b = self.anchor(second, unit=Unit.between)
        return BoundaryPair(start=min(a, b), end=max(a, b))

    def _span_pair(self, span: Span, *, unit: Unit) -> BoundaryPair:
        """Range between now and now shifted by `span`: backwards for `as_of`, forwards otherwise."""

        try:
            delta = _as_delta(span)
            moment = self.now - delta if unit == Unit.as_of else self.now + delta
        except (ValueError, OverflowError) as exc:
            raise ParseError(f"{unit} span {span} is out of range") from exc

        start, end = (moment, self.now) if unit == Unit.as_of else (self.now, moment)
        if start > end:
            raise ParseError(f"{unit} takes only a non-negative span, got {span}")
        return BoundaryPair(start=start, end=end)

    def as_of(self, value: Any) -> BoundaryPair:
        """From `value` ago (a span) or from a given point in time, up to now."""

        if isinstance(value, Span):
            return self._span_pair(value, unit=Unit.as_of)
        return self.between(self.anchor(value, unit=Unit.as_of), self.now)

    def up_to(self, value: Any) -> BoundaryPair:
        """From now up to `value` from now (a span) or up to a given point in time."""

        if isinstance(value, Span):
            return self._span_pair(value, unit=Unit.up_to)
        return self.between(self.now, self.anchor(value, unit=Unit.up_to))

    def resolve(self, unit: Unit, *args: Any, **options: Any) -> BoundaryPair:
        """Dispatch to the resolver for `unit`."""

        resolvers: dict[Unit, Callable[..., BoundaryPair]] = {
            Unit.year: self.year,
            Unit.month: self.month,
            Unit.fortnight: self.fortnight,
            Unit.week: self.week,
            Unit.weekend: self.weekend,
            Unit.day: self.day,
            Unit.today: self.today,
            Unit.yesterday: self.yesterday,
            Unit.tomorrow: self.tomorrow,
            Unit.past: self.past,
            Unit.future: self.future,
            Unit.between: self.between,
            Unit.as_of: self.as_of,
            Unit.up_to: self.up_to,
        }

        try:
            resolver = resolvers[Unit(unit)]
        except (KeyError, ValueError) as exc:
            raise ParseError(f"Unsupported unit: {unit}") from exc

        return resolver(*args, **options)
