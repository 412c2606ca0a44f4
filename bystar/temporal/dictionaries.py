"""English vocabularies for month names, duration units and count words.

These mappings are used by the normalizer and the dynamic method router and should remain small
and deterministic.
"""

from __future__ import annotations

import calendar

MONTH_NAMES: tuple[str, ...] = tuple(calendar.month_name[1:])

MONTH_SYNONYMS: dict[int, tuple[str, ...]] = {
    idx + 1: (name.lower(), name[:3].lower()) for idx, name in enumerate(MONTH_NAMES)
}
# "sept" is common enough in user input to accept alongside "sep".
MONTH_SYNONYMS[9] = MONTH_SYNONYMS[9] + ("sept",)

MONTH_TERM_TO_NUMBER: dict[str, int] = {
    term: number for number, terms in MONTH_SYNONYMS.items() for term in terms
}

DURATION_UNIT_SYNONYMS: dict[str, tuple[str, ...]] = {
    "second": ("second", "seconds", "sec", "secs"),
    "minute": ("minute", "minutes", "min", "mins"),
    "hour": ("hour", "hours"),
    "day": ("day", "days"),
    "week": ("week", "weeks"),
    "fortnight": ("fortnight", "fortnights"),
    "month": ("month", "months"),
    "year": ("year", "years"),
}

DURATION_TERM_TO_UNIT: dict[str, str] = {
    term: unit for unit, terms in DURATION_UNIT_SYNONYMS.items() for term in terms
}

COUNT_WORDS: dict[str, int] = {
    "a": 1,
    "an": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}


def month_from_name(text: str) -> int | None:
    """Return the month number (1-12) for a month name or abbreviation, else `None`."""

    return MONTH_TERM_TO_NUMBER.get((text or "").strip().lower().rstrip("."))


def duration_unit_from_term(term: str) -> str | None:
    """Return the canonical duration unit for a singular/plural term, else `None`."""

    return DURATION_TERM_TO_UNIT.get((term or "").strip().lower())


def count_from_term(term: str) -> int | None:
    """Parse a count given as digits or as a small English number word."""

    value = (term or "").strip().lower()
    if value.isdecimal():
        return int(value)
    return COUNT_WORDS.get(value)
