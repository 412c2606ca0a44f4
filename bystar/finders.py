"""Time-scoped finders for models.

`ByStarModel` adds finders such as `by_year`, `by_month`, `yesterday` or `between` to a `Model`.
Every finder:
    1) resolves its arguments into a `BoundaryPair` relative to `clock()`,
    2) builds a parameterized range query on the chosen timestamp field (plus optional refinement),
    3) delegates execution to the model's dispatcher.

Dynamic names such as `as_of_2_weeks_ago` or `up_to_6_weeks_from_now` are routed through
`bystar.temporal.router`; any other unknown name falls back to the host model's column finders.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, ClassVar

from bystar.model import Model, ModelMeta
from bystar.sql.builder import RefineCallback, SortDirection, build_range_query, coerce_refinement
from bystar.temporal.ranges import RangeResolver, utc_now
from bystar.temporal.relative import DEFAULT_LANGUAGES
from bystar.temporal.router import match_dynamic_call
from bystar.temporal.schema import DEFAULT_FIELD, BoundaryPair, Unit, options_from_kwargs

logger = logging.getLogger(__name__)


class ByStarMeta(ModelMeta):
    """Route `as_of_*` / `up_to_*` names before deferring to the host's dynamic finders."""

    def _dynamic_finder(cls, name: str) -> Callable[..., Any] | None:
        call = match_dynamic_call(name)
        if call is not None:
            method = cls.as_of if call.verb == Unit.as_of else cls.up_to
            return functools.partial(method, call.argument)
        return super()._dynamic_finder(name)


class ByStarModel(Model, metaclass=ByStarMeta):
    """A `Model` with time-scoped finders.

    Class attributes:
        clock: zero-argument callable returning the current aware datetime ("now").
        default_field: timestamp column used when a finder is called without `field=`.
        languages: dateparser languages used for relative phrases.
    """

    clock: ClassVar[Callable[[], datetime]] = staticmethod(utc_now)
    default_field: ClassVar[str] = DEFAULT_FIELD
    languages: ClassVar[Sequence[str]] = DEFAULT_LANGUAGES

    @classmethod
    def resolver(cls) -> RangeResolver:
        return RangeResolver(now=cls.clock(), languages=cls.languages)

    @classmethod
    def range_for(cls, unit: Unit | str, *args: Any, **kwargs: Any) -> BoundaryPair:
        """Resolve the boundary pair a finder for `unit` would query, without querying."""

        return cls.resolver().resolve(unit, *args, **kwargs)

    @classmethod
    def _find_in_range(
            cls,
            unit: Unit,
            boundary: BoundaryPair,
            *,
            field: str | None,
            refine: RefineCallback | None,
            direction: SortDirection = "ASC",
    ) -> list[Any]:
        options = options_from_kwargs(default_field=cls.default_field, field=field)
        query = build_range_query(
            table=cls.__tablename__,
            columns=cls.__columns__,
            boundary=boundary,
            field=options.field,
            refinement=coerce_refinement(refine),
            direction=direction,
        )
        logger.debug(
            "by_star model=%s unit=%s field=%s start=%s end=%s",
            cls.__name__,
            unit,
            options.field,
            boundary.start.isoformat(),
            boundary.end.isoformat(),
        )
        return cls.find_all(query)

    @classmethod
    def by_year(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records within a calendar year (the current one by default)."""

        boundary = cls.resolver().year(value)
        return cls._find_in_range(Unit.year, boundary, field=field, refine=refine)

    @classmethod
    def by_month(
            cls,
            value: Any = None,
            *,
            year: int | str | None = None,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records within a month given by number, name, date or phrase.

        `year` overrides the year a month number/name is looked up in.
        """

        options = options_from_kwargs(default_field=cls.default_field, year=year)
        boundary = cls.resolver().month(value, year=options.year)
        return cls._find_in_range(Unit.month, boundary, field=field, refine=refine)

    @classmethod
    def by_fortnight(
            cls,
            value: Any = None,
            *,
            year: int | str | None = None,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records within the n-th 14-day block of the year (or the block containing a date)."""

        options = options_from_kwargs(default_field=cls.default_field, year=year)
        boundary = cls.resolver().fortnight(value, year=options.year)
        return cls._find_in_range(Unit.fortnight, boundary, field=field, refine=refine)

    @classmethod
    def by_week(
            cls,
            value: Any = None,
            *,
            year: int | str | None = None,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records within the n-th 7-day block of the year (or the block containing a date)."""

        options = options_from_kwargs(default_field=cls.default_field, year=year)
        boundary = cls.resolver().week(value, year=options.year)
        return cls._find_in_range(Unit.week, boundary, field=field, refine=refine)

    @classmethod
    def by_weekend(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        boundary = cls.resolver().weekend(value)
        return cls._find_in_range(Unit.weekend, boundary, field=field, refine=refine)

    @classmethod
    def by_day(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        boundary = cls.resolver().day(value)
        return cls._find_in_range(Unit.day, boundary, field=field, refine=refine)

    @classmethod
    def today(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        boundary = cls.resolver().today(value)
        return cls._find_in_range(Unit.today, boundary, field=field, refine=refine)

    @classmethod
    def yesterday(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records on the day before `value` (today by default)."""

        boundary = cls.resolver().yesterday(value)
        return cls._find_in_range(Unit.yesterday, boundary, field=field, refine=refine)

    @classmethod
    def tomorrow(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records on the day after `value` (today by default)."""

        boundary = cls.resolver().tomorrow(value)
        return cls._find_in_range(Unit.tomorrow, boundary, field=field, refine=refine)

    @classmethod
    def past(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records up to `value` (now by default), newest first."""

        boundary = cls.resolver().past(value)
        return cls._find_in_range(
            Unit.past, boundary, field=field, refine=refine, direction="DESC"
        )

    @classmethod
    def future(
            cls,
            value: Any = None,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records from `value` (now by default) onwards, oldest first."""

        boundary = cls.resolver().future(value)
        return cls._find_in_range(Unit.future, boundary, field=field, refine=refine)

    @classmethod
    def between(
            cls,
            first: Any,
            second: Any,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records between two points in time, in either order."""

        boundary = cls.resolver().between(first, second)
        return cls._find_in_range(Unit.between, boundary, field=field, refine=refine)

    @classmethod
    def as_of(
            cls,
            value: Any,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records from a span ago or from a point in time, up to now.

        A span is a `Duration`, `timedelta` or `relativedelta`; anything else is an anchor.
        """

        boundary = cls.resolver().as_of(value)
        return cls._find_in_range(Unit.as_of, boundary, field=field, refine=refine)

    @classmethod
    def up_to(
            cls,
            value: Any,
            *,
            field: str | None = None,
            refine: RefineCallback | None = None,
    ) -> list[Any]:
        """Records from now up to a span from now or a point in time."""

        boundary = cls.resolver().up_to(value)
        return cls._find_in_range(Unit.up_to, boundary, field=field, refine=refine)
