"""Exceptions raised by the dataforge toolkit."""

from typing import Any


class DataforgeError(Exception):
    """Base exception for dataforge errors."""

    pass


class DatabaseConnectionError(DataforgeError):
    """Raised when a connection cannot be configured or opened."""

    pass


class UnsupportedDialectError(DataforgeError):
    """Raised when an operation is attempted on an unsupported dialect."""

    pass


class UnsupportedColumnTypeError(DataforgeError):
    """Raised when a column type has no mapping for the dialect."""

    pass


class SchemaUsageError(DataforgeError):
    """Raised when a schema modifier is called without a current column."""

    pass


class ExecutionError(DataforgeError):
    """Raised when the driver rejects a statement."""

    def __init__(
        self, message: str, sql: str | None = None, bindings: Any = None
    ) -> None:
        super().__init__(message)
        self.sql = sql
        self.bindings = bindings


class ColumnNotFoundError(ExecutionError):
    """Raised when an introspected column does not exist."""

    pass
