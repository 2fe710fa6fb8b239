"""Clause types and renderers shared by the query builder."""

from dataclasses import dataclass
from typing import Any


@dataclass
class WhereClause:
    """A single predicate; IN predicates carry a sequence of values."""

    column: str
    operator: str
    value: Any
    boolean: str = "AND"

    @property
    def is_in(self) -> bool:
        return self.operator == "IN"


@dataclass
class JoinClause:
    """An INNER or LEFT join."""

    kind: str
    table: str
    left_column: str
    operator: str
    right_column: str


@dataclass
class OrderClause:
    """An ORDER BY key."""

    column: str
    direction: str = "ASC"


def placeholders(count: int) -> str:
    """Build a comma separated list of ? placeholders.

    Example:
        >>> placeholders(3)
        "?, ?, ?"
    """
    return ", ".join("?" for _ in range(count))


def build_where_clause(wheres: list[WhereClause]) -> str:
    """Render WHERE predicates in declaration order.

    The first predicate always opens with WHERE, whatever connective it
    was declared with.

    Example:
        >>> build_where_clause([WhereClause("id", "=", 1),
        ...                     WhereClause("id", "=", 2, "OR")])
        "WHERE id = ? OR id = ?"
    """
    parts: list[str] = []
    for index, where in enumerate(wheres):
        boolean = "WHERE" if index == 0 else where.boolean
        if where.is_in:
            parts.append(
                f"{boolean} {where.column} IN ({placeholders(len(where.value))})"
            )
        else:
            parts.append(f"{boolean} {where.column} {where.operator} ?")
    return " ".join(parts)


def where_bindings(wheres: list[WhereClause]) -> list[Any]:
    """Collect WHERE values in render order, expanding IN predicates."""
    bindings: list[Any] = []
    for where in wheres:
        if where.is_in:
            bindings.extend(where.value)
        else:
            bindings.append(where.value)
    return bindings


def build_join_clause(joins: list[JoinClause]) -> str:
    """Render joins in declaration order.

    Example:
        >>> build_join_clause([JoinClause("LEFT", "posts", "users.id", "=",
        ...                               "posts.user_id")])
        "LEFT JOIN posts ON users.id = posts.user_id"
    """
    return " ".join(
        f"{join.kind} JOIN {join.table} ON "
        f"{join.left_column} {join.operator} {join.right_column}"
        for join in joins
    )


def build_order_by_clause(orders: list[OrderClause]) -> str:
    """Render a multi-key ORDER BY clause."""
    if not orders:
        return ""
    keys = ", ".join(f"{order.column} {order.direction}" for order in orders)
    return f"ORDER BY {keys}"


def build_limit_clause(limit: int | None, offset: int | None = None) -> str:
    """Render LIMIT and OFFSET; either may be omitted independently.

    Example:
        >>> build_limit_clause(10, 20)
        "LIMIT 10 OFFSET 20"
    """
    parts: list[str] = []
    if limit is not None:
        parts.append(f"LIMIT {limit}")
    if offset is not None:
        parts.append(f"OFFSET {offset}")
    return " ".join(parts)
