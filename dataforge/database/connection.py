"""Database connection wrapper."""

import re
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.engine import Connection as DriverHandle
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from dataforge.config import DatabaseConfig, Settings
from dataforge.exceptions import DatabaseConnectionError, ExecutionError
from dataforge.log import get_logger
from dataforge.types import BindingsType, Driver, RowType

if TYPE_CHECKING:
    from dataforge.database.query_builder import QueryBuilder

logger = get_logger(__name__)

# DBAPI paramstyles that expect %s instead of ?
FORMAT_PARAMSTYLES = ("format", "pyformat")

# Quoted literals and identifiers, or a bare ? / % outside them
SQL_TOKEN_PATTERN = re.compile(
    r"'(?:[^'\\]|\\.|'')*'"
    r'|"(?:[^"\\]|\\.|"")*"'
    r"|`[^`]*`"
    r"|\?"
    r"|%"
)


def to_format_paramstyle(sql: str) -> str:
    """Rewrite ? placeholders to %s, leaving quoted text untouched.

    Format drivers interpolate every %, so literal percent signs are doubled
    inside and outside quotes.

    Example:
        >>> to_format_paramstyle("SELECT 'why?' AS q, x FROM t WHERE id = ?")
        "SELECT 'why?' AS q, x FROM t WHERE id = %s"
    """

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "?":
            return "%s"
        return token.replace("%", "%%")

    return SQL_TOKEN_PATTERN.sub(_replace, sql)


def _mysql_url(config: DatabaseConfig) -> URL:
    return URL.create(
        "mysql+mysqlconnector",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.name,
        query={"charset": "utf8mb4"},
    )


def _pgsql_url(config: DatabaseConfig) -> URL:
    return URL.create(
        "postgresql+psycopg",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.name,
    )


def _sqlite_url(config: DatabaseConfig) -> URL:
    return URL.create("sqlite", database=config.name)


def _sqlsrv_url(config: DatabaseConfig) -> URL:
    return URL.create(
        "mssql+pyodbc",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.name,
        query={"driver": config.odbc_driver},
    )


URL_BUILDERS: dict[Driver, Callable[[DatabaseConfig], URL]] = {
    Driver.MYSQL: _mysql_url,
    Driver.PGSQL: _pgsql_url,
    Driver.SQLITE: _sqlite_url,
    Driver.SQLSRV: _sqlsrv_url,
}


def build_url(config: DatabaseConfig) -> URL:
    """Build the SQLAlchemy URL for a database configuration.

    Args:
        config: Validated database configuration

    Returns:
        Dialect-specific connection URL
    """
    return URL_BUILDERS[config.driver](config)


class Connection:
    """A single driver session bound to one database.

    Rows are returned as column-keyed dictionaries and every driver
    failure surfaces as an exception.
    """

    def __init__(self, config: DatabaseConfig | Mapping[str, Any]) -> None:
        """Validate the configuration and open the driver session.

        Args:
            config: A DatabaseConfig or a mapping with driver, host, name,
                user and pass keys

        Raises:
            DatabaseConnectionError: If the driver is unknown or the
                database cannot be reached
        """
        self.config = self._validate(config)
        self.url = build_url(self.config)

        try:
            self._engine: Engine = create_engine(
                self.url,
                poolclass=NullPool,
                isolation_level="AUTOCOMMIT",
            )
            self._handle: DriverHandle | None = self._engine.connect()
        except (SQLAlchemyError, ImportError) as e:
            logger.error(f"Failed to connect to {self.connection_string}: {e}")
            raise DatabaseConnectionError(f"Database connection failed: {e}") from e

        logger.info(f"Connected to {self.connection_string}")

    @staticmethod
    def _validate(config: DatabaseConfig | Mapping[str, Any]) -> DatabaseConfig:
        if isinstance(config, DatabaseConfig):
            return config
        try:
            return DatabaseConfig.model_validate(dict(config))
        except ValidationError as e:
            raise DatabaseConnectionError(
                f"Invalid database configuration: {e}"
            ) from e

    @classmethod
    def from_settings(cls, settings: Settings) -> "Connection":
        """Open a connection from loaded application settings."""
        if settings.database is None:
            raise DatabaseConnectionError("No database configured in settings")
        return cls(settings.database)

    @property
    def driver(self) -> Driver:
        """Dialect tag of this connection."""
        return self.config.driver

    @property
    def connection_string(self) -> str:
        """Connection URL with the password masked."""
        return self.url.render_as_string(hide_password=True)

    @property
    def handle(self) -> DriverHandle:
        """Raw driver handle."""
        if self._handle is None:
            raise DatabaseConnectionError("Connection is closed")
        return self._handle

    @property
    def is_connected(self) -> bool:
        """Check if the driver session is open."""
        return self._handle is not None

    def get_query_builder(self) -> "QueryBuilder":
        """Create a fresh query builder bound to this connection."""
        from dataforge.database.query_builder import QueryBuilder

        return QueryBuilder(self)

    def _prepare(self, sql: str, bindings: BindingsType) -> tuple[str, Any]:
        """Adapt ? placeholders to the DBAPI paramstyle."""
        if not bindings:
            return sql, None
        if self._engine.dialect.paramstyle in FORMAT_PARAMSTYLES:
            sql = to_format_paramstyle(sql)
        return sql, tuple(bindings)

    def _run(self, sql: str, bindings: BindingsType) -> Any:
        statement, params = self._prepare(sql, bindings)
        logger.debug(f"SQL: {sql} | bindings: {list(bindings or [])}")
        try:
            return self.handle.exec_driver_sql(statement, params)
        except SQLAlchemyError as e:
            logger.error(f"Statement failed: {sql} ({e})")
            raise ExecutionError(
                f"Statement failed: {e}", sql=sql, bindings=bindings
            ) from e

    def execute(self, sql: str, bindings: BindingsType = None) -> int:
        """Execute a statement that returns no rows.

        Args:
            sql: SQL text with ? placeholders
            bindings: Positional parameter values

        Returns:
            Number of affected rows as reported by the driver
        """
        return self._run(sql, bindings).rowcount

    def fetch_all(self, sql: str, bindings: BindingsType = None) -> list[RowType]:
        """Execute a query and return every row as a dictionary."""
        result = self._run(sql, bindings)
        return [dict(row) for row in result.mappings()]

    def fetch_one(self, sql: str, bindings: BindingsType = None) -> RowType | None:
        """Execute a query and return its first row, if any."""
        row = self._run(sql, bindings).mappings().first()
        return dict(row) if row is not None else None

    def close(self) -> None:
        """Close the driver session and release the engine."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self._engine.dispose()
            logger.info(f"Disconnected from {self.connection_string}")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
