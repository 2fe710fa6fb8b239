"""Global pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from dataforge import setup_test_logging
from dataforge.database.connection import Connection
from dataforge.database.query_builder import QueryBuilder
from dataforge.types import Driver


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path using pytest's tmp_path."""
    return tmp_path / "test.db"


@pytest.fixture
def sqlite_connection(temp_db_path: Path) -> Generator[Connection, None, None]:
    """Open a real SQLite connection on a temporary file."""
    connection = Connection({"driver": "sqlite", "name": str(temp_db_path)})
    yield connection
    connection.close()


@pytest.fixture
def users_table(sqlite_connection: Connection) -> Connection:
    """Create a users table on the SQLite connection."""
    sqlite_connection.get_query_builder().create(
        "users",
        {
            "id": {"type": "integer", "primaryKey": True, "autoIncrement": True},
            "name": {"type": "varchar", "length": 100},
            "email": {"type": "varchar", "nullable": True},
            "age": {"type": "integer", "nullable": True},
        },
    )
    return sqlite_connection


def _mock_connection(driver: Driver) -> MagicMock:
    connection = MagicMock(spec=Connection)
    connection.driver = driver
    connection.get_query_builder.side_effect = lambda: QueryBuilder(connection)
    connection.execute.return_value = 1
    connection.fetch_all.return_value = []
    connection.fetch_one.return_value = None
    return connection


@pytest.fixture
def mock_connection_factory() -> Callable[[Driver], MagicMock]:
    """Build recording connection doubles for any driver."""
    return _mock_connection


@pytest.fixture
def mysql_connection() -> MagicMock:
    """Recording MySQL connection double."""
    return _mock_connection(Driver.MYSQL)


@pytest.fixture
def pgsql_connection() -> MagicMock:
    """Recording PostgreSQL connection double."""
    return _mock_connection(Driver.PGSQL)


@pytest.fixture
def executed() -> Callable[[MagicMock], list[str]]:
    """Return the SQL text of every execute() call on a connection double."""

    def _executed(connection: MagicMock) -> list[str]:
        return [call.args[0] for call in connection.execute.call_args_list]

    return _executed


@pytest.fixture
def sample_users() -> list[dict[str, Any]]:
    """Sample user records."""
    return [
        {"name": "Ada", "email": "ada@example.com", "age": 36},
        {"name": "Grace", "email": "grace@example.com", "age": 45},
        {"name": "Linus", "email": None, "age": 28},
    ]
