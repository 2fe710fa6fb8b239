"""Translate a Schema into dialect-specific DDL."""

from collections.abc import Callable, Sequence
from typing import Any

from dataforge.database.grammar import get_grammar, quote_string
from dataforge.database.introspection import ColumnInfo, get_inspector
from dataforge.database.query_builder import QueryBuilder
from dataforge.exceptions import ColumnNotFoundError, UnsupportedDialectError
from dataforge.log import get_logger
from dataforge.migration.schema import (
    AddColumn,
    ChangeColumn,
    CreateIndex,
    DropColumn,
    Modification,
    RenameColumn,
    Schema,
)
from dataforge.types import Driver, ModificationType

logger = get_logger(__name__)

# Dialects with ALTER TABLE support
ALTER_DIALECTS = (Driver.MYSQL, Driver.PGSQL)


class TableBuilder:
    """Create and alter one table through a query builder."""

    def __init__(self, table_name: str, query_builder: QueryBuilder) -> None:
        self.table_name = table_name
        self.query_builder = query_builder
        self.connection = query_builder.get_connection()
        self.driver = self.connection.driver
        self.grammar = get_grammar(self.driver)

    def build(self, schema: Schema) -> bool:
        """Create the table from the schema's structure."""
        return self.query_builder.create(self.table_name, schema.get_structure())

    def modify(self, modifications: Sequence[Modification]) -> None:
        """Apply alterations in declaration order.

        Raises:
            UnsupportedDialectError: If the dialect is not MySQL or PostgreSQL
        """
        if self.driver not in ALTER_DIALECTS:
            raise UnsupportedDialectError(
                f"Table modifications are not supported for: {self.driver.value}"
            )

        handlers: dict[ModificationType, Callable[[Any], None]] = {
            ModificationType.ADD: self._add_column,
            ModificationType.CHANGE: self._change_column,
            ModificationType.DROP: self._drop_column,
            ModificationType.RENAME: self._rename_column,
            ModificationType.INDEX: self._create_index,
        }
        for modification in modifications:
            logger.debug(f"{self.table_name}: applying {modification.type.value}")
            handlers[modification.type](modification)

    def _run(self, sql: str) -> None:
        self.query_builder.raw(sql)

    def _add_column(self, modification: AddColumn) -> None:
        column = modification.column
        sql = (
            f"ALTER TABLE {self.table_name} "
            f"ADD COLUMN {self.grammar.column_sql(column)}"
        )
        # AFTER is rendered for every dialect; only MySQL honors placement
        if modification.after is not None:
            sql += f" AFTER {modification.after}"
        self._run(sql)

        if column.has_foreign_key:
            self._run(
                f"ALTER TABLE {self.table_name} "
                f"ADD {self.grammar.foreign_key_sql(column)}"
            )

    def _change_column(self, modification: ChangeColumn) -> None:
        sql = (
            f"ALTER TABLE {self.table_name} "
            f"MODIFY COLUMN {self.grammar.column_sql(modification.column)}"
        )
        if modification.after is not None:
            sql += f" AFTER {modification.after}"
        self._run(sql)

    def _drop_column(self, modification: DropColumn) -> None:
        self._run(f"ALTER TABLE {self.table_name} DROP COLUMN {modification.column}")

    def _rename_column(self, modification: RenameColumn) -> None:
        source, target = modification.from_column, modification.to_column

        if self.driver == Driver.PGSQL:
            self._run(
                f"ALTER TABLE {self.table_name} RENAME COLUMN {source} TO {target}"
            )
            return

        # MySQL has no rename-only syntax; restate the live definition
        info = get_inspector(self.connection).describe(self.table_name, source)
        if info is None:
            raise ColumnNotFoundError(
                f"Column not found: {self.table_name}.{source}"
            )
        self._run(
            f"ALTER TABLE {self.table_name} CHANGE {source} {target} "
            f"{self._mysql_definition(info)}"
        )

    @staticmethod
    def _mysql_definition(info: ColumnInfo) -> str:
        """Rebuild a MySQL column definition from SHOW COLUMNS output."""
        parts = [info.type]
        if not info.nullable:
            parts.append("NOT NULL")

        if info.default is not None:
            default = str(info.default)
            numeric = default.replace(".", "", 1).lstrip("-").isdigit()
            if numeric or default.upper().startswith("CURRENT_TIMESTAMP"):
                parts.append(f"DEFAULT {default}")
            else:
                parts.append(f"DEFAULT {quote_string(default)}")

        # MySQL 8 reports DEFAULT_GENERATED, which is not valid DDL
        extra = " ".join(
            token for token in info.extra.upper().split() if token != "DEFAULT_GENERATED"
        )
        if extra:
            parts.append(extra)

        return " ".join(parts)

    def _create_index(self, modification: CreateIndex) -> None:
        self._run(self.grammar.create_index_sql(self.table_name, modification.columns))
