"""Dialect-specific column grammar.

Each grammar maps logical column types to native type names and renders
column definitions, foreign key constraints and CREATE TABLE statements.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import replace
from typing import Any, ClassVar

from dataforge.database.definitions import ColumnDefinition
from dataforge.exceptions import UnsupportedColumnTypeError, UnsupportedDialectError
from dataforge.types import ColumnType, Driver

DEFAULT_VARCHAR_LENGTH = 255
DEFAULT_PRECISION = 10
DEFAULT_SCALE = 2


def quote_string(value: str) -> str:
    """Quote a string literal, doubling embedded quotes."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


class ColumnGrammar(ABC):
    """Column grammar for one SQL dialect."""

    driver: ClassVar[Driver]
    auto_increment_keyword: ClassVar[str] = "AUTO_INCREMENT"

    @property
    @abstractmethod
    def native_types(self) -> dict[ColumnType, str]:
        """Native spelling of each supported logical type."""
        pass

    def column_type(self, column: ColumnDefinition) -> str:
        """Render the native type of a column.

        Raises:
            UnsupportedColumnTypeError: If the dialect has no mapping
        """
        native = self.native_types.get(column.type)
        if native is None:
            raise UnsupportedColumnTypeError(
                f"Unsupported column type for {self.driver.value}: "
                f"{column.type.value} ({column.name})"
            )

        if column.type == ColumnType.VARCHAR:
            return f"{native}({column.length or DEFAULT_VARCHAR_LENGTH})"
        if column.type == ColumnType.DECIMAL:
            if column.precision is not None and column.scale is not None:
                return f"{native}({column.precision},{column.scale})"
            return f"{native}({DEFAULT_PRECISION},{DEFAULT_SCALE})"
        if column.type == ColumnType.ENUM:
            allowed = ",".join(quote_string(value) for value in column.values)
            return f"{native}({allowed})"
        return native

    def literal(self, value: Any) -> str:
        """Render a default value as an SQL literal."""
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, str):
            return quote_string(value)
        return str(value)

    def column_sql(self, column: ColumnDefinition) -> str:
        """Render a full column definition.

        Order: name, type, PRIMARY KEY, auto increment, NULL/NOT NULL,
        DEFAULT, UNIQUE.
        """
        parts = [column.name, self.column_type(column)]

        if column.primary_key:
            parts.append("PRIMARY KEY")
        if column.auto_increment:
            parts.append(self.auto_increment_keyword)

        parts.append("NULL" if column.nullable else "NOT NULL")

        if column.default is not None:
            parts.append(f"DEFAULT {self.literal(column.default)}")
        if column.unique:
            parts.append("UNIQUE")

        return " ".join(parts)

    def foreign_key_sql(self, column: ColumnDefinition) -> str:
        """Render a table-level foreign key constraint for a column."""
        return (
            f"FOREIGN KEY ({column.name}) "
            f"REFERENCES {column.foreign_table}({column.foreign_column or 'id'})"
        )

    def create_table_sql(self, table: str, columns: Sequence[ColumnDefinition]) -> str:
        """Render CREATE TABLE IF NOT EXISTS for the given columns."""
        definitions = [self.column_sql(column) for column in columns]
        definitions.extend(
            self.foreign_key_sql(column) for column in columns if column.has_foreign_key
        )
        return f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(definitions)})"

    def create_index_sql(self, table: str, columns: Sequence[str]) -> str:
        """Render CREATE INDEX with the deterministic <table>_<cols>_idx name."""
        index_name = f"{table}_{'_'.join(columns)}_idx"
        return f"CREATE INDEX {index_name} ON {table} ({', '.join(columns)})"


class MySQLGrammar(ColumnGrammar):
    """MySQL column grammar."""

    driver = Driver.MYSQL

    @property
    def native_types(self) -> dict[ColumnType, str]:
        return {
            ColumnType.INTEGER: "INT",
            ColumnType.VARCHAR: "VARCHAR",
            ColumnType.TEXT: "TEXT",
            ColumnType.TIMESTAMP: "TIMESTAMP",
            ColumnType.DATETIME: "DATETIME",
            ColumnType.DATE: "DATE",
            ColumnType.DECIMAL: "DECIMAL",
            ColumnType.BOOLEAN: "TINYINT(1)",
            ColumnType.JSON: "JSON",
            ColumnType.ENUM: "ENUM",
        }


class PostgresGrammar(ColumnGrammar):
    """PostgreSQL column grammar."""

    driver = Driver.PGSQL

    @property
    def native_types(self) -> dict[ColumnType, str]:
        return {
            ColumnType.INTEGER: "INTEGER",
            ColumnType.VARCHAR: "VARCHAR",
            ColumnType.TEXT: "TEXT",
            ColumnType.TIMESTAMP: "TIMESTAMP",
            ColumnType.DATETIME: "TIMESTAMP",
            ColumnType.DATE: "DATE",
            ColumnType.DECIMAL: "DECIMAL",
            ColumnType.BOOLEAN: "BOOLEAN",
            ColumnType.JSON: "JSONB",
        }

    def literal(self, value: Any) -> str:
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        return super().literal(value)

    def column_sql(self, column: ColumnDefinition) -> str:
        # SERIAL PRIMARY KEY replaces every other modifier
        if column.primary_key and column.auto_increment:
            return f"{column.name} SERIAL PRIMARY KEY"
        return super().column_sql(replace(column, auto_increment=False))


class SQLiteGrammar(ColumnGrammar):
    """Baseline grammar for SQLite."""

    driver = Driver.SQLITE
    auto_increment_keyword = "AUTOINCREMENT"

    @property
    def native_types(self) -> dict[ColumnType, str]:
        return {
            ColumnType.INTEGER: "INTEGER",
            ColumnType.VARCHAR: "VARCHAR",
            ColumnType.TEXT: "TEXT",
            ColumnType.TIMESTAMP: "TIMESTAMP",
            ColumnType.DATETIME: "DATETIME",
            ColumnType.DATE: "DATE",
            ColumnType.DECIMAL: "DECIMAL",
            ColumnType.BOOLEAN: "BOOLEAN",
            ColumnType.JSON: "TEXT",
        }


class SQLServerGrammar(ColumnGrammar):
    """Baseline grammar for SQL Server."""

    driver = Driver.SQLSRV
    auto_increment_keyword = "IDENTITY(1,1)"

    @property
    def native_types(self) -> dict[ColumnType, str]:
        return {
            ColumnType.INTEGER: "INT",
            ColumnType.VARCHAR: "VARCHAR",
            ColumnType.TEXT: "NVARCHAR(MAX)",
            ColumnType.TIMESTAMP: "DATETIME2",
            ColumnType.DATETIME: "DATETIME2",
            ColumnType.DATE: "DATE",
            ColumnType.DECIMAL: "DECIMAL",
            ColumnType.BOOLEAN: "BIT",
            ColumnType.JSON: "NVARCHAR(MAX)",
        }


GRAMMARS: dict[Driver, type[ColumnGrammar]] = {
    Driver.MYSQL: MySQLGrammar,
    Driver.PGSQL: PostgresGrammar,
    Driver.SQLITE: SQLiteGrammar,
    Driver.SQLSRV: SQLServerGrammar,
}


def get_grammar(driver: Driver) -> ColumnGrammar:
    """Get the column grammar for a driver.

    Raises:
        UnsupportedDialectError: If no grammar exists for the driver
    """
    grammar_class = GRAMMARS.get(driver)
    if grammar_class is None:
        raise UnsupportedDialectError(f"No column grammar for driver: {driver}")
    return grammar_class()
