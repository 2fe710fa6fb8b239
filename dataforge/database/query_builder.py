"""Fluent SQL query builder."""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from dataforge.database.clauses import (
    JoinClause,
    OrderClause,
    WhereClause,
    build_join_clause,
    build_limit_clause,
    build_order_by_clause,
    build_where_clause,
    placeholders,
    where_bindings,
)
from dataforge.database.definitions import ColumnDefinition, to_column_definitions
from dataforge.database.grammar import get_grammar
from dataforge.database.introspection import get_inspector
from dataforge.log import get_logger
from dataforge.types import BindingsType, RowType

if TYPE_CHECKING:
    from dataforge.database.connection import Connection

logger = get_logger(__name__)

# Columns quick_insert fills itself or leaves to the database
MANAGED_COLUMNS = ("id", "created_at", "updated_at")


class QueryBuilder:
    """Assemble one parameterized statement and run it on a connection.

    Every setter mutates the builder and returns it, so calls chain:

        >>> qb.table("users").where("id", "=", 5).first()

    A builder is meant for a single statement; take a fresh one from
    ``Connection.get_query_builder()`` for the next.
    """

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection
        self._table: str | None = None
        self._selects: list[str] = ["*"]
        self._wheres: list[WhereClause] = []
        self._joins: list[JoinClause] = []
        self._orders: list[OrderClause] = []
        self._limit: int | None = None
        self._offset: int | None = None

    def table(self, table: str) -> "QueryBuilder":
        """Set the target table."""
        self._table = table
        return self

    def select(self, columns: str | Sequence[str] = "*") -> "QueryBuilder":
        """Replace the default * projection."""
        self._selects = [columns] if isinstance(columns, str) else list(columns)
        return self

    def where(self, column: str, operator: str, value: Any) -> "QueryBuilder":
        """Add an AND predicate."""
        self._wheres.append(WhereClause(column, operator, value, "AND"))
        return self

    def or_where(self, column: str, operator: str, value: Any) -> "QueryBuilder":
        """Add an OR predicate."""
        self._wheres.append(WhereClause(column, operator, value, "OR"))
        return self

    def where_in(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        """Add an IN predicate; values must be non-empty for valid SQL."""
        self._wheres.append(WhereClause(column, "IN", list(values), "AND"))
        return self

    def join(
        self, table: str, left_column: str, operator: str, right_column: str
    ) -> "QueryBuilder":
        """Add an INNER JOIN."""
        self._joins.append(
            JoinClause("INNER", table, left_column, operator, right_column)
        )
        return self

    def left_join(
        self, table: str, left_column: str, operator: str, right_column: str
    ) -> "QueryBuilder":
        """Add a LEFT JOIN."""
        self._joins.append(JoinClause("LEFT", table, left_column, operator, right_column))
        return self

    def order_by(self, column: str, direction: str = "ASC") -> "QueryBuilder":
        """Add an ORDER BY key."""
        self._orders.append(OrderClause(column, direction.upper()))
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        self._limit = limit
        return self

    def offset(self, offset: int) -> "QueryBuilder":
        self._offset = offset
        return self

    def get_connection(self) -> "Connection":
        return self.connection

    def _require_table(self) -> str:
        if not self._table:
            raise ValueError("No table selected; call table() first")
        return self._table

    def _where_sql(self) -> str:
        return f" {build_where_clause(self._wheres)}" if self._wheres else ""

    def to_sql(self) -> tuple[str, list[Any]]:
        """Render the SELECT statement without executing it.

        Returns:
            Tuple of (query, bindings)
        """
        query = f"SELECT {', '.join(self._selects)} FROM {self._require_table()}"

        if self._joins:
            query += f" {build_join_clause(self._joins)}"
        query += self._where_sql()
        if self._orders:
            query += f" {build_order_by_clause(self._orders)}"

        limit_clause = build_limit_clause(self._limit, self._offset)
        if limit_clause:
            query += f" {limit_clause}"

        return query, where_bindings(self._wheres)

    def get(self) -> list[RowType]:
        """Run the SELECT and return all rows."""
        query, bindings = self.to_sql()
        return self.connection.fetch_all(query, bindings)

    def first(self) -> RowType | None:
        """Run the SELECT with LIMIT 1 and return the row, if any."""
        self.limit(1)
        rows = self.get()
        return rows[0] if rows else None

    def count(self) -> int:
        """Count the rows matching the current predicates."""
        self._selects = ["COUNT(*) AS count"]
        row = self.first()
        return int(row["count"]) if row else 0

    def insert(self, data: Mapping[str, Any]) -> bool:
        """Insert one row; column order follows the mapping's key order."""
        if not data:
            raise ValueError("Cannot insert empty data")

        columns = list(data.keys())
        query = (
            f"INSERT INTO {self._require_table()} ({', '.join(columns)}) "
            f"VALUES ({placeholders(len(columns))})"
        )
        self.connection.execute(query, list(data.values()))
        return True

    def insert_multiple(self, records: Sequence[Mapping[str, Any]]) -> bool:
        """Insert many rows in one statement.

        The first record's keys define the column list; keys missing from a
        later record bind as NULL.

        Returns:
            False without touching the database when records is empty,
            True otherwise
        """
        if not records:
            logger.warning("insert_multiple called with no records")
            return False

        columns = list(records[0].keys())
        row_placeholders = f"({placeholders(len(columns))})"
        query = (
            f"INSERT INTO {self._require_table()} ({', '.join(columns)}) "
            f"VALUES {', '.join(row_placeholders for _ in records)}"
        )
        bindings = [record.get(column) for record in records for column in columns]

        self.connection.execute(query, bindings)
        return True

    def update(self, data: Mapping[str, Any]) -> bool:
        """Update rows matching the predicates built so far.

        Bindings are the data values followed by the WHERE values.
        """
        if not data:
            raise ValueError("Cannot update with empty data")

        sets = ", ".join(f"{column} = ?" for column in data)
        query = f"UPDATE {self._require_table()} SET {sets}{self._where_sql()}"
        bindings = list(data.values()) + where_bindings(self._wheres)

        self.connection.execute(query, bindings)
        return True

    def delete(self) -> bool:
        """Delete rows matching the predicates; no predicates deletes all."""
        query = f"DELETE FROM {self._require_table()}{self._where_sql()}"
        self.connection.execute(query, where_bindings(self._wheres))
        return True

    def create(
        self,
        table: str,
        columns: Mapping[str, ColumnDefinition | Mapping[str, Any]],
    ) -> bool:
        """Create a table if it does not exist.

        Args:
            table: Table name
            columns: Column definitions keyed by column name, either
                ColumnDefinition objects or plain mappings

        Returns:
            True once the statement ran
        """
        grammar = get_grammar(self.connection.driver)
        query = grammar.create_table_sql(table, to_column_definitions(columns))
        self.connection.execute(query)
        return True

    def quick_insert(self, *values: Any) -> "QueryBuilder":
        """Insert a row by pairing values with the live table's columns.

        Auto-increment columns and id/created_at/updated_at are skipped; the
        remaining columns pair with ``values`` by position in the order the
        engine reports them. created_at is stamped with the current time
        when the table has it.

        Raises:
            ValueError: If the value count does not match the column count
        """
        inspector = get_inspector(self.connection)
        live = [
            info.name
            for info in inspector.columns(self._require_table())
            if not info.is_auto_increment
        ]
        columns = [name for name in live if name not in MANAGED_COLUMNS]

        if len(columns) != len(values):
            raise ValueError(
                f"quick_insert expected {len(columns)} values for "
                f"{', '.join(columns)}, got {len(values)}"
            )

        data = dict(zip(columns, values))
        if "created_at" in live:
            data["created_at"] = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        self.insert(data)
        return self

    def raw(self, sql: str, bindings: BindingsType = None) -> bool:
        """Execute caller-supplied SQL, bypassing builder state."""
        self.connection.execute(sql, bindings)
        return True
