"""Minimal table-gateway models.

`Model` is the host persistence layer the time-scoped finders delegate to: it executes built queries
through a `QueryDispatcher` and wraps rows into model instances. It also provides dynamic
column finders (`find_by_<column>`, `find_all_by_<column>`) via the metaclass.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable
from typing import Any, ClassVar

from bystar.db.dispatcher import QueryDispatcher
from bystar.sql.builder import BuiltQuery, build_column_query

_COLUMN_FINDER_RE = re.compile(r"^find_(?P<all>all_)?by_(?P<column>[a-z_][a-z0-9_]*)$")


class ModelMeta(type):
    """Resolve dynamic finder names that are not regular class attributes."""

    def __getattr__(cls, name: str) -> Any:
        # Only called when normal attribute lookup fails.
        finder = cls._dynamic_finder(name)
        if finder is None:
            raise AttributeError(f"type object {cls.__name__!r} has no attribute {name!r}")
        return finder

    def _dynamic_finder(cls, name: str) -> Callable[..., Any] | None:
        if name.startswith("_"):
            return None

        match = _COLUMN_FINDER_RE.match(name)
        if not match or match.group("column") not in cls.__columns__:
            return None

        method = cls.find_all_by if match.group("all") else cls.find_by
        return functools.partial(method, match.group("column"))


class Model(metaclass=ModelMeta):
    """Base class for a table-backed record.

    Subclasses declare `__tablename__` and the allowlisted `__columns__`; `dispatcher` must be set
    before any finder is called.
    """

    __tablename__: ClassVar[str] = ""
    __columns__: ClassVar[tuple[str, ...]] = ()

    dispatcher: ClassVar[QueryDispatcher | None] = None

    def __init__(self, **attrs: Any) -> None:
        for key, value in attrs.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        attrs = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({attrs})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def get_dispatcher(cls) -> QueryDispatcher:
        if cls.dispatcher is None:
            raise RuntimeError(f"{cls.__name__} has no dispatcher configured")
        return cls.dispatcher

    @classmethod
    def find_all(cls, query: BuiltQuery) -> list[Any]:
        """Execute `query` and wrap every returned row into an instance of `cls`."""

        return [cls(**row) for row in cls.get_dispatcher().fetch_all(query)]

    @classmethod
    def find_all_by(cls, column: str, value: Any) -> list[Any]:
        query = build_column_query(
            table=cls.__tablename__,
            columns=cls.__columns__,
            column=column,
            value=value,
        )
        return cls.find_all(query)

    @classmethod
    def find_by(cls, column: str, value: Any) -> Any | None:
        """Return the first record whose `column` equals `value`, or `None`."""

        query = build_column_query(
            table=cls.__tablename__,
            columns=cls.__columns__,
            column=column,
            value=value,
            limit=1,
        )
        records = cls.find_all(query)
        return records[0] if records else None
