"""Live column introspection, one inspector per dialect."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from dataforge.exceptions import UnsupportedDialectError
from dataforge.log import get_logger
from dataforge.types import Driver, RowType

if TYPE_CHECKING:
    from dataforge.database.connection import Connection

logger = get_logger(__name__)


def _text(value: Any) -> str:
    """Decode metadata values some drivers return as bytes."""
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return "" if value is None else str(value)


@dataclass
class ColumnInfo:
    """Metadata of a column as reported by the live database."""

    name: str
    type: str
    nullable: bool
    default: Any = None
    extra: str = ""

    @property
    def is_auto_increment(self) -> bool:
        return "AUTO_INCREMENT" in self.extra.upper()


class ColumnInspector(ABC):
    """Describe the columns of a live table."""

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection

    @abstractmethod
    def columns(self, table: str) -> list[ColumnInfo]:
        """List the columns of a table in the order the engine reports."""
        pass

    def describe(self, table: str, column: str) -> ColumnInfo | None:
        """Describe one column, or return None if it does not exist."""
        for info in self.columns(table):
            if info.name == column:
                return info
        return None


class MySQLInspector(ColumnInspector):
    """Inspector backed by SHOW COLUMNS."""

    @staticmethod
    def _to_info(row: RowType) -> ColumnInfo:
        return ColumnInfo(
            name=_text(row["Field"]),
            type=_text(row["Type"]),
            nullable=_text(row["Null"]) == "YES",
            default=row["Default"],
            extra=_text(row["Extra"]),
        )

    def columns(self, table: str) -> list[ColumnInfo]:
        rows = self.connection.fetch_all(f"SHOW COLUMNS FROM {table}")
        return [self._to_info(row) for row in rows]

    def describe(self, table: str, column: str) -> ColumnInfo | None:
        row = self.connection.fetch_one(
            f"SHOW COLUMNS FROM {table} WHERE Field = ?", [column]
        )
        return self._to_info(row) if row else None


class PostgresInspector(ColumnInspector):
    """Inspector backed by information_schema.columns."""

    QUERY = (
        "SELECT column_name, data_type, is_nullable, column_default, is_identity "
        "FROM information_schema.columns "
        "WHERE table_schema = current_schema() AND table_name = ? "
        "ORDER BY ordinal_position"
    )

    def columns(self, table: str) -> list[ColumnInfo]:
        infos: list[ColumnInfo] = []
        for row in self.connection.fetch_all(self.QUERY, [table]):
            default = row["column_default"]
            serial = isinstance(default, str) and default.startswith("nextval(")
            identity = row["is_identity"] == "YES"
            infos.append(
                ColumnInfo(
                    name=row["column_name"],
                    type=row["data_type"],
                    nullable=row["is_nullable"] == "YES",
                    default=default,
                    extra="auto_increment" if serial or identity else "",
                )
            )
        return infos


class SQLiteInspector(ColumnInspector):
    """Inspector backed by PRAGMA table_info."""

    def columns(self, table: str) -> list[ColumnInfo]:
        infos: list[ColumnInfo] = []
        for row in self.connection.fetch_all(f"PRAGMA table_info({table})"):
            # INTEGER PRIMARY KEY aliases the rowid
            rowid = bool(row["pk"]) and _text(row["type"]).upper() == "INTEGER"
            infos.append(
                ColumnInfo(
                    name=row["name"],
                    type=_text(row["type"]),
                    nullable=not row["notnull"],
                    default=row["dflt_value"],
                    extra="auto_increment" if rowid else "",
                )
            )
        return infos


class SQLServerInspector(ColumnInspector):
    """Inspector backed by INFORMATION_SCHEMA.COLUMNS."""

    QUERY = (
        "SELECT COLUMN_NAME AS name, DATA_TYPE AS type, IS_NULLABLE AS nullable, "
        "COLUMN_DEFAULT AS column_default, "
        "COLUMNPROPERTY(OBJECT_ID(TABLE_SCHEMA + '.' + TABLE_NAME), "
        "COLUMN_NAME, 'IsIdentity') AS is_identity "
        "FROM INFORMATION_SCHEMA.COLUMNS WHERE TABLE_NAME = ? "
        "ORDER BY ORDINAL_POSITION"
    )

    def columns(self, table: str) -> list[ColumnInfo]:
        return [
            ColumnInfo(
                name=row["name"],
                type=row["type"],
                nullable=row["nullable"] == "YES",
                default=row["column_default"],
                extra="auto_increment" if row["is_identity"] == 1 else "",
            )
            for row in self.connection.fetch_all(self.QUERY, [table])
        ]


INSPECTORS: dict[Driver, type[ColumnInspector]] = {
    Driver.MYSQL: MySQLInspector,
    Driver.PGSQL: PostgresInspector,
    Driver.SQLITE: SQLiteInspector,
    Driver.SQLSRV: SQLServerInspector,
}


def get_inspector(connection: "Connection") -> ColumnInspector:
    """Get the column inspector for a connection's dialect.

    Raises:
        UnsupportedDialectError: If no inspector exists for the driver
    """
    inspector_class = INSPECTORS.get(connection.driver)
    if inspector_class is None:
        raise UnsupportedDialectError(
            f"Column introspection is not supported for: {connection.driver}"
        )
    logger.debug(f"Using {inspector_class.__name__} for {connection.driver.value}")
    return inspector_class(connection)
