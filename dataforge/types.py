"""Common type definitions for the dataforge toolkit."""

from enum import Enum
from typing import Any, TypeAlias

BindingsType: TypeAlias = list[Any] | tuple[Any, ...] | None
RowType: TypeAlias = dict[str, Any]


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class Driver(str, Enum):
    """Supported database drivers."""

    MYSQL = "mysql"
    PGSQL = "pgsql"
    SQLITE = "sqlite"
    SQLSRV = "sqlsrv"


class ColumnType(str, Enum):
    """Logical column types understood by the schema layer."""

    INTEGER = "integer"
    VARCHAR = "varchar"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    DATETIME = "datetime"
    DATE = "date"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    JSON = "json"
    ENUM = "enum"


class ModificationType(str, Enum):
    """Kinds of queued table alterations."""

    ADD = "add"
    CHANGE = "change"
    DROP = "drop"
    RENAME = "rename"
    INDEX = "index"
