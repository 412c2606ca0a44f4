"""Dynamic finder name routing.

Finder names such as `as_of_2_weeks_ago` or `up_to_6_weeks_from_now` are parsed into a
`(verb, count, unit)` triple through an explicit registry of patterns. Names that match no pattern
are left alone, so the host model can apply its own dynamic finders (`find_by_<column>`).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from bystar.temporal.dictionaries import count_from_term, duration_unit_from_term
from bystar.temporal.schema import Duration, Unit


@dataclass(frozen=True)
class DynamicCall:
    """A parsed dynamic finder name.

    Exactly one of `duration` and `phrase` is set: `duration` for "<N> <unit>" names, `phrase` for
    anything else, which is resolved as a relative date phrase when the finder is called.
    """

    verb: Unit
    duration: Duration | None = None
    phrase: str | None = None

    @property
    def argument(self) -> Duration | str:
        return self.duration if self.duration is not None else self.phrase


@dataclass(frozen=True)
class _Route:
    verb: Unit
    duration_re: re.Pattern[str]
    phrase_re: re.Pattern[str]


_ROUTES: tuple[_Route, ...] = (
    _Route(
        verb=Unit.as_of,
        duration_re=re.compile(r"^as_of_(?P<count>[a-z0-9]+)_(?P<unit>[a-z]+)_ago$"),
        phrase_re=re.compile(r"^as_of_(?P<phrase>[a-z0-9][a-z0-9_]*)$"),
    ),
    _Route(
        verb=Unit.up_to,
        duration_re=re.compile(r"^up_to_(?P<count>[a-z0-9]+)_(?P<unit>[a-z]+)_from_now$"),
        phrase_re=re.compile(r"^up_to_(?P<phrase>[a-z0-9][a-z0-9_]*)$"),
    ),
)


def _parse_duration(match: re.Match[str]) -> Duration | None:
    count = count_from_term(match.group("count"))
    unit = duration_unit_from_term(match.group("unit"))
    if count is None or unit is None:
        return None
    return Duration(count=count, unit=unit)


def match_dynamic_call(name: str) -> DynamicCall | None:
    """Parse a dynamic finder name, or return `None` if no route recognizes it."""

    if not name or name.startswith("_"):
        return None

    for route in _ROUTES:
        match = route.duration_re.match(name)
        if match:
            duration = _parse_duration(match)
            if duration is not None:
                return DynamicCall(verb=route.verb, duration=duration)

        match = route.phrase_re.match(name)
        if match:
            return DynamicCall(verb=route.verb, phrase=match.group("phrase").replace("_", " "))

    return None
