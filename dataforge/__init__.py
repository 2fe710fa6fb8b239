"""dataforge: connection wrapper, query builder, migrations and seeding."""

from .config import DatabaseConfig, Settings, load_settings
from .database import Connection, QueryBuilder
from .exceptions import (
    ColumnNotFoundError,
    DatabaseConnectionError,
    DataforgeError,
    ExecutionError,
    SchemaUsageError,
    UnsupportedColumnTypeError,
    UnsupportedDialectError,
)
from .log import get_logger, setup_logging, setup_test_logging
from .migration import Migration, MigrationManager, Schema, TableBuilder
from .seeder import Factory, Seeder
from .types import ColumnType, Driver, Environment

__all__ = [
    "DatabaseConfig",
    "Settings",
    "load_settings",
    "Connection",
    "QueryBuilder",
    "Schema",
    "TableBuilder",
    "Migration",
    "MigrationManager",
    "Factory",
    "Seeder",
    "Driver",
    "ColumnType",
    "Environment",
    "DataforgeError",
    "DatabaseConnectionError",
    "UnsupportedDialectError",
    "UnsupportedColumnTypeError",
    "SchemaUsageError",
    "ExecutionError",
    "ColumnNotFoundError",
    "get_logger",
    "setup_logging",
    "setup_test_logging",
]
