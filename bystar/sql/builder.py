"""Deterministic SQL builder.

The builder converts a validated `BoundaryPair` plus an optional caller `Refinement` into a
parameterized SQL query. Identifiers (tables, columns) are strictly allowlisted against the model's
declared columns; only values become bound parameters.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from bystar.temporal.schema import IDENTIFIER_RE, BoundaryPair


class SQLBuilderError(ValueError):
    """Raised when a finder call cannot be converted into deterministic SQL."""


SortDirection = Literal["ASC", "DESC"]


class Refinement(BaseModel):
    """Additional query conditions supplied by the caller.

    `conditions` are SQL predicates combined with AND; their `%s` placeholders are bound from
    `params` in order. `joins` are appended verbatim after the FROM clause.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    joins: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    params: list[Any] = Field(default_factory=list)
    order_by: str | None = None
    limit: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def validate_placeholders(self) -> Refinement:
        """Every bound parameter needs exactly one placeholder in `conditions`."""

        placeholders = sum(c.count("%s") for c in self.conditions)
        if placeholders != len(self.params):
            raise ValueError(
                f"conditions have {placeholders} placeholders but {len(self.params)} params were given"
            )
        return self


RefinementLike = Refinement | Mapping[str, Any]
RefineCallback = Callable[[], RefinementLike | None]


@dataclass(frozen=True)
class BuiltQuery:
    """A parameterized SQL query ready for execution."""

    sql: str
    params: tuple[Any, ...]


def coerce_refinement(refine: RefineCallback | RefinementLike | None) -> Refinement | None:
    """Evaluate a refinement callback (if any) and validate its result."""

    if refine is None:
        return None

    value = refine() if callable(refine) else refine
    if value is None or isinstance(value, Refinement):
        return value

    try:
        return Refinement.model_validate(value)
    except ValidationError as exc:
        raise SQLBuilderError(f"Invalid refinement: {exc}") from exc


def _identifier(name: str, *, allowed: Iterable[str] | None = None) -> str:
    if not IDENTIFIER_RE.match(name or ""):
        raise SQLBuilderError(f"Invalid identifier: {name!r}")
    if allowed is not None and name not in allowed:
        raise SQLBuilderError(f"Unknown column: {name!r}")
    return name


def _where_and(clauses: list[str]) -> str:
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


def _order_clause(order_by: str | None) -> str:
    if not order_by:
        return ""
    return f"ORDER BY {order_by}"


def build_range_query(
        *,
        table: str,
        columns: Iterable[str],
        boundary: BoundaryPair,
        field: str,
        refinement: Refinement | None = None,
        direction: SortDirection = "ASC",
) -> BuiltQuery:
    """Build a `SELECT` over `table` restricted to `boundary` on `field`.

    Rows are ordered by `field` in `direction` unless the refinement overrides `order_by`.
    """

    columns = tuple(columns)
    table = _identifier(table)
    field = _identifier(field, allowed=columns)
    if direction not in ("ASC", "DESC"):
        raise SQLBuilderError(f"Invalid sort direction: {direction!r}")

    column_ref = f"{table}.{field}"
    clauses = [f"{column_ref} BETWEEN %s AND %s"]
    params: list[Any] = list(boundary.as_tuple())
    joins = ""
    order_by = f"{column_ref} {direction}"
    limit = ""

    if refinement is not None:
        joins = " ".join(refinement.joins)
        clauses.extend(f"({c})" for c in refinement.conditions)
        params.extend(refinement.params)
        order_by = refinement.order_by or order_by
        if refinement.limit is not None:
            limit = "LIMIT %s"
            params.append(refinement.limit)

    # Joins can multiply rows; DISTINCT keeps one row per record.
    select = "SELECT DISTINCT" if joins else "SELECT"
    sql = " ".join(
        part
        for part in (
            f"{select} {table}.* FROM {table}",
            joins,
            _where_and(clauses),
            _order_clause(order_by),
            limit,
        )
        if part
    )
    return BuiltQuery(sql=sql, params=tuple(params))


def build_column_query(
        *,
        table: str,
        columns: Iterable[str],
        column: str,
        value: Any,
        limit: int | None = None,
) -> BuiltQuery:
    """Build a `SELECT` over `table` matching `column = value` (or `IS NULL` for `None`)."""

    columns = tuple(columns)
    table = _identifier(table)
    column = _identifier(column, allowed=columns)

    params: list[Any] = []
    if value is None:
        clause = f"{table}.{column} IS NULL"
    else:
        clause = f"{table}.{column} = %s"
        params.append(value)

    sql = f"SELECT {table}.* FROM {table} {_where_and([clause])}"
    if limit is not None:
        sql += " LIMIT %s"
        params.append(limit)
    return BuiltQuery(sql=sql, params=tuple(params))
