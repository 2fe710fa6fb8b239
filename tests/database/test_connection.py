"""Tests for the connection wrapper."""

from pathlib import Path

import pytest

from dataforge.config import DatabaseConfig, Settings
from dataforge.database.connection import (
    Connection,
    build_url,
    to_format_paramstyle,
)
from dataforge.database.query_builder import QueryBuilder
from dataforge.exceptions import DatabaseConnectionError, ExecutionError
from dataforge.types import Driver


def _config(driver: str, **overrides: object) -> DatabaseConfig:
    values = {
        "driver": driver,
        "host": "db",
        "name": "app",
        "user": "root",
        "pass": "secret",
    }
    values.update(overrides)
    return DatabaseConfig.model_validate(values)


def test_build_url_mysql() -> None:
    """Test MySQL URLs use mysql-connector and utf8mb4."""
    url = build_url(_config("mysql"))

    assert url.render_as_string(hide_password=False) == (
        "mysql+mysqlconnector://root:secret@db/app?charset=utf8mb4"
    )


def test_build_url_pgsql() -> None:
    """Test PostgreSQL URLs use psycopg."""
    url = build_url(_config("pgsql", port=5433))

    assert url.render_as_string(hide_password=False) == (
        "postgresql+psycopg://root:secret@db:5433/app"
    )


def test_build_url_sqlite() -> None:
    """Test SQLite URLs treat the name as a file path."""
    url = build_url(DatabaseConfig(driver=Driver.SQLITE, name="test.db"))

    assert url.render_as_string() == "sqlite:///test.db"


def test_build_url_sqlsrv() -> None:
    """Test SQL Server URLs carry the ODBC driver name."""
    url = build_url(_config("sqlsrv"))

    assert url.drivername == "mssql+pyodbc"
    assert url.query["driver"] == "ODBC Driver 18 for SQL Server"


def test_unknown_driver_rejected() -> None:
    """Test unknown drivers fail before any network activity."""
    with pytest.raises(DatabaseConnectionError, match="Invalid database configuration"):
        Connection({"driver": "oracle", "name": "app"})


def test_missing_name_rejected() -> None:
    """Test the database name is required."""
    with pytest.raises(DatabaseConnectionError):
        Connection({"driver": "sqlite"})


def test_unreachable_server() -> None:
    """Test a refused connection surfaces as DatabaseConnectionError."""
    with pytest.raises(DatabaseConnectionError, match="Database connection failed"):
        Connection(_config("pgsql", host="127.0.0.1", port=1))


def test_unopenable_sqlite_file(tmp_path: Path) -> None:
    """Test SQLite open failures surface as DatabaseConnectionError."""
    path = tmp_path / "missing" / "dir" / "test.db"

    with pytest.raises(DatabaseConnectionError):
        Connection({"driver": "sqlite", "name": str(path)})


def test_connection_properties(sqlite_connection: Connection) -> None:
    """Test driver tag and connection state."""
    assert sqlite_connection.driver == Driver.SQLITE
    assert sqlite_connection.is_connected
    assert sqlite_connection.handle is not None
    assert isinstance(sqlite_connection.get_query_builder(), QueryBuilder)


def test_connection_string_hides_password() -> None:
    """Test the password never appears in the rendered connection string."""
    connection = Connection.__new__(Connection)
    connection.url = build_url(_config("mysql"))

    assert "secret" not in connection.connection_string
    assert "***" in connection.connection_string


def test_execute_and_fetch(sqlite_connection: Connection) -> None:
    """Test execute reports row counts and fetch methods return dicts."""
    sqlite_connection.execute("CREATE TABLE tags (id INTEGER, label TEXT)")
    affected = sqlite_connection.execute(
        "INSERT INTO tags (id, label) VALUES (?, ?), (?, ?)", [1, "a", 2, "b"]
    )

    assert affected == 2
    assert sqlite_connection.fetch_all("SELECT * FROM tags ORDER BY id") == [
        {"id": 1, "label": "a"},
        {"id": 2, "label": "b"},
    ]
    assert sqlite_connection.fetch_one("SELECT label FROM tags WHERE id = ?", [2]) == {
        "label": "b"
    }
    assert sqlite_connection.fetch_one("SELECT * FROM tags WHERE id = ?", [3]) is None


def test_execution_error_keeps_statement(sqlite_connection: Connection) -> None:
    """Test failed statements carry their SQL and bindings."""
    with pytest.raises(ExecutionError) as exc_info:
        sqlite_connection.execute("INSERT INTO nowhere VALUES (?)", [1])

    assert exc_info.value.sql == "INSERT INTO nowhere VALUES (?)"
    assert exc_info.value.bindings == [1]


def test_prepare_qmark(sqlite_connection: Connection) -> None:
    """Test qmark drivers receive the statement unchanged."""
    assert sqlite_connection._prepare("SELECT ?", [1]) == ("SELECT ?", (1,))
    assert sqlite_connection._prepare("SELECT 1", None) == ("SELECT 1", None)


def test_prepare_format_paramstyle(
    sqlite_connection: Connection, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test ? becomes %s and literal % is escaped for format drivers."""
    monkeypatch.setattr(sqlite_connection._engine.dialect, "paramstyle", "pyformat")

    sql, params = sqlite_connection._prepare(
        "SELECT * FROM users WHERE name LIKE '%a' AND id = ?", [1]
    )

    assert sql == "SELECT * FROM users WHERE name LIKE '%%a' AND id = %s"
    assert params == (1,)


def test_prepare_format_paramstyle_skips_quoted_text(
    sqlite_connection: Connection, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a ? inside a string literal is not treated as a placeholder."""
    monkeypatch.setattr(sqlite_connection._engine.dialect, "paramstyle", "format")

    sql, params = sqlite_connection._prepare(
        "SELECT id FROM notes WHERE body = 'why?' AND id = ?", [1]
    )

    assert sql == "SELECT id FROM notes WHERE body = 'why?' AND id = %s"
    assert sql.count("%s") == len(params)


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("SELECT 'it''s?' , ?", "SELECT 'it''s?' , %s"),
        (
            'SELECT "odd?col" FROM t WHERE a = ?',
            'SELECT "odd?col" FROM t WHERE a = %s',
        ),
        ("SELECT `q?` FROM t WHERE a = ?", "SELECT `q?` FROM t WHERE a = %s"),
        ("SELECT 'a\\'?' , ?", "SELECT 'a\\'?' , %s"),
        ("SELECT '100%?' , ? , 5 % 2", "SELECT '100%%?' , %s , 5 %% 2"),
    ],
)
def test_to_format_paramstyle(sql: str, expected: str) -> None:
    """Test quoting styles and percent escaping in paramstyle conversion."""
    assert to_format_paramstyle(sql) == expected


def test_close_and_context_manager(temp_db_path: Path) -> None:
    """Test the handle is unusable after close."""
    with Connection({"driver": "sqlite", "name": str(temp_db_path)}) as connection:
        assert connection.is_connected

    assert not connection.is_connected
    with pytest.raises(DatabaseConnectionError, match="Connection is closed"):
        _ = connection.handle

    # closing twice is a no-op
    connection.close()


def test_from_settings(temp_db_path: Path) -> None:
    """Test opening a connection from settings."""
    settings = Settings(
        database=DatabaseConfig(driver=Driver.SQLITE, name=str(temp_db_path))
    )

    with Connection.from_settings(settings) as connection:
        assert connection.driver == Driver.SQLITE


def test_from_settings_without_database() -> None:
    """Test settings without a database are rejected."""
    with pytest.raises(DatabaseConnectionError, match="No database configured"):
        Connection.from_settings(Settings())
