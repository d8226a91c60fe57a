"""
Query option translation.

Index views and association listings carry a small filter/sort option set:

    {"where": [("status", "active"),
               ("price", "between", 10, 20),
               ("tag", "in", "a,b,c")],
     "order_by": [("inserted_at", "desc")]}

`parse_query_opts` normalizes it into `QueryOptions`; backend adapters
apply those to their native query value (`sqlalchemy.Select` for the
simple-schema backend, `ClauseQuery` for the declarative one). Everything
here is pure: inputs are never mutated and a new query value is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Select

from .errors import QueryError

logger = logging.getLogger(__name__)

KNOWN_OPTIONS = ("where", "order_by")

# Operator aliases; textual matches currently collapse to equality
OPERATOR_ALIASES: dict[str, str] = {
    "ge": "gte",
    "greater_equal_than": "gte",
    "le": "lte",
    "less_equal_than": "lte",
    "equal_to": "eq",
    "like": "eq",
    "ilike": "eq",
}

SORT_DIRECTIONS = (
    "asc",
    "desc",
    "asc_nulls_first",
    "asc_nulls_last",
    "desc_nulls_first",
    "desc_nulls_last",
)


class Clause(BaseModel):
    """One normalized filter clause."""

    field: str
    op: str
    value: Any

    model_config = ConfigDict(frozen=True)


class QueryOptions(BaseModel):
    """Normalized query options."""

    where: tuple[Clause, ...] = ()
    order_by: tuple[tuple[str, str], ...] = ()

    model_config = ConfigDict(frozen=True)


class ClauseQuery(BaseModel):
    """
    Backend-neutral query value used by the declarative backend.

    Attributes:
        resource: Resource class being queried
        action: Read action the query runs through
        filters: Filter clauses, combined with AND
        sort: (field, direction) pairs
    """

    resource: Any = None
    action: str | None = None
    filters: tuple[Clause, ...] = ()
    sort: tuple[tuple[str, str], ...] = ()

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def filter(self, clause: Clause) -> ClauseQuery:
        return self.model_copy(update={"filters": (*self.filters, clause)})

    def sort_by(self, pairs: Iterable[tuple[str, str]]) -> ClauseQuery:
        return self.model_copy(update={"sort": (*self.sort, *pairs)})


# =============================================================================
# Parsing
# =============================================================================


def _name(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def normalize_operator(op: Any) -> str:
    """
    Canonical operator name.

    Examples:
        >>> normalize_operator("greater_equal_than")
        'gte'
        >>> normalize_operator("ilike")
        'eq'
    """
    name = _name(op)
    return OPERATOR_ALIASES.get(name, name)


def _in_values(value: Any) -> tuple[Any, ...]:
    if isinstance(value, str):
        return tuple(value.split(","))
    return tuple(value)


def _expand_mappings(clauses: Iterable[Any]) -> Iterator[Any]:
    for clause in clauses:
        if isinstance(clause, Mapping):
            yield from clause.items()
        else:
            yield clause


def parse_where(clauses: Iterable[Any]) -> tuple[Clause, ...]:
    """
    Normalize where clauses.

    Accepts `(field, value)`, `(field, op, value)` and
    `(field, "between", low, high)`; empty clauses are skipped. A mapping
    contributes one equality clause per key.
    """
    parsed: list[Clause] = []
    for clause in _expand_mappings(clauses):
        if not clause:
            continue
        items = tuple(clause)

        if len(items) == 2:
            field, value = items
            parsed.append(Clause(field=_name(field), op="eq", value=value))
        elif len(items) == 3:
            field, op, value = items
            op = normalize_operator(op)
            if op == "in":
                value = _in_values(value)
            parsed.append(Clause(field=_name(field), op=op, value=value))
        elif len(items) == 4 and normalize_operator(items[1]) == "between":
            field, _, low, high = items
            parsed.append(Clause(field=_name(field), op="gte", value=low))
            parsed.append(Clause(field=_name(field), op="lte", value=high))
        else:
            raise QueryError(f"Malformed where clause: {clause!r}")
    return tuple(parsed)


def parse_order_by(order_by: Any) -> tuple[tuple[str, str], ...]:
    """
    Normalize a sort specification into (field, direction) pairs.

    Accepts a field name, a list of names, a mapping of field to direction,
    or a list of pairs in either (field, direction) or (direction, field)
    order.
    """
    if order_by is None:
        return ()
    if isinstance(order_by, str | Enum):
        return ((_name(order_by), "asc"),)
    if isinstance(order_by, Mapping):
        return tuple((_name(k), _name(v)) for k, v in order_by.items())

    pairs: list[tuple[str, str]] = []
    for item in order_by:
        if isinstance(item, str | Enum):
            pairs.append((_name(item), "asc"))
            continue
        parts = tuple(item)
        if len(parts) != 2:
            raise QueryError(f"Malformed order_by item: {item!r}")
        first, second = (_name(part) for part in parts)
        if first in SORT_DIRECTIONS and second not in SORT_DIRECTIONS:
            pairs.append((second, first))
        else:
            pairs.append((first, second))
    return tuple(pairs)


def parse_query_opts(opts: Mapping[str, Any] | Iterable[tuple[str, Any]] | None) -> QueryOptions:
    """
    Normalize a raw option set.

    Unrecognized option keys are ignored.
    """
    if opts is None:
        return QueryOptions()
    items = opts.items() if isinstance(opts, Mapping) else opts

    where: tuple[Clause, ...] = ()
    order_by: tuple[tuple[str, str], ...] = ()
    for key, value in items:
        key = _name(key)
        if key == "where":
            where = (*where, *parse_where(value or ()))
        elif key == "order_by":
            order_by = (*order_by, *parse_order_by(value))
        else:
            logger.debug(f"Ignoring unknown query option '{key}'")
    return QueryOptions(where=where, order_by=order_by)


# =============================================================================
# Backend application
# =============================================================================


def apply_to_clause_query(query: ClauseQuery, options: QueryOptions) -> ClauseQuery:
    """Apply parsed options to a ClauseQuery."""
    for clause in options.where:
        query = query.filter(clause)
    if options.order_by:
        query = query.sort_by(options.order_by)
    return query


def _column(query: Select, name: str) -> Any:
    columns = query.selected_columns
    if name not in columns:
        raise QueryError(f"Column '{name}' is not selected by the query")
    return columns[name]


def _sql_condition(column: Any, clause: Clause) -> Any:
    if clause.op == "eq":
        return column == clause.value
    if clause.op == "not_eq":
        return column != clause.value
    if clause.op == "gt":
        return column > clause.value
    if clause.op == "gte":
        return column >= clause.value
    if clause.op == "lt":
        return column < clause.value
    if clause.op == "lte":
        return column <= clause.value
    if clause.op == "in":
        return column.in_(list(clause.value))
    raise QueryError(f"Operator '{clause.op}' is not supported for SQL queries")


def _sql_ordering(column: Any, direction: str) -> Any:
    base, _, nulls = direction.partition("_nulls_")
    if base not in ("asc", "desc") or nulls not in ("", "first", "last"):
        raise QueryError(f"Unknown sort direction '{direction}'")
    ordering = column.desc() if base == "desc" else column.asc()
    if nulls == "first":
        ordering = ordering.nulls_first()
    elif nulls == "last":
        ordering = ordering.nulls_last()
    return ordering


def apply_to_select(query: Select, options: QueryOptions) -> Select:
    """Apply parsed options to a SQLAlchemy select statement."""
    for clause in options.where:
        query = query.where(_sql_condition(_column(query, clause.field), clause))
    if options.order_by:
        query = query.order_by(
            *(_sql_ordering(_column(query, f), d) for f, d in options.order_by)
        )
    return query


def translate(query: Any, opts: Mapping[str, Any] | None, adapter: Any) -> Any:
    """
    Translate raw query options onto a backend query value.

    Args:
        query: Backend query value (Select or ClauseQuery)
        opts: Raw options with optional `where` and `order_by`
        adapter: The resource's backend adapter

    Returns:
        A new query value; `query` is left untouched
    """
    return adapter.apply_query(query, parse_query_opts(opts))
