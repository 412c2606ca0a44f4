"""Relative date phrase resolution (UTC).

Phrases such as "next tuesday", "2 weeks ago" or "tomorrow" are resolved against an explicit
`now` rather than the process clock, so the same phrase always resolves to the same instant in
tests.

Resolution order:
    - "next/last/this <weekday>" is handled here (dateparser does not support those reliably),
    - everything else is delegated to `dateparser` with `now` as the relative base.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

import dateparser

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES: tuple[str, ...] = ("en",)

_WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
_WEEKDAY_PATTERN = "|".join(_WEEKDAYS)

_RELATIVE_WEEKDAY_RE = re.compile(rf"^(?P<dir>next|last|this)\s+(?P<day>{_WEEKDAY_PATTERN})$")
_MULTISPACE_RE = re.compile(r"\s+")


class RelativeParseError(RuntimeError):
    """Raised when a relative date phrase cannot be resolved."""

    def __init__(self, phrase: str) -> None:
        self.phrase = phrase
        super().__init__(f'couldn\'t work out "{phrase.capitalize()}"; please be more precise.')


def _normalize_phrase(phrase: str) -> str:
    value = (phrase or "").strip().lower().replace("_", " ")
    return _MULTISPACE_RE.sub(" ", value)


def _resolve_relative_weekday(phrase: str, now: datetime) -> datetime | None:
    match = _RELATIVE_WEEKDAY_RE.match(phrase)
    if not match:
        return None

    target = _WEEKDAYS.index(match.group("day"))
    direction = match.group("dir")

    if direction == "next":
        days = (target - now.weekday()) % 7 or 7
    elif direction == "last":
        days = -((now.weekday() - target) % 7 or 7)
    else:
        # "this <weekday>" is the occurrence within the current Monday-based week.
        days = target - now.weekday()
    return now + timedelta(days=days)


def _resolve_with_dateparser(phrase: str, now: datetime, languages: Sequence[str]) -> datetime | None:
    dt = dateparser.parse(
        phrase,
        languages=list(languages),
        settings={
            # dateparser expects a naive relative base expressed in TIMEZONE.
            "RELATIVE_BASE": now.astimezone(UTC).replace(tzinfo=None),
            "TIMEZONE": "UTC",
            "TO_TIMEZONE": "UTC",
            "RETURN_AS_TIMEZONE_AWARE": True,
        },
    )
    if not dt:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def resolve_phrase(
        phrase: str,
        *,
        now: datetime,
        languages: Sequence[str] = DEFAULT_LANGUAGES,
) -> datetime:
    """Resolve a relative date phrase into an aware UTC datetime.

    Raises:
        RelativeParseError: If the phrase cannot be resolved.
    """

    value = _normalize_phrase(phrase)
    if not value:
        raise RelativeParseError(phrase)

    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    resolved = _resolve_relative_weekday(value, now)
    if resolved is None:
        resolved = _resolve_with_dateparser(value, now, languages)

    if resolved is None:
        logger.info("unresolved phrase=%r", value)
        raise RelativeParseError(value)
    return resolved
