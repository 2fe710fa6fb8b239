"""Tests for dialect column grammars."""

import pytest

from dataforge.database.definitions import ColumnDefinition
from dataforge.database.grammar import get_grammar, quote_string
from dataforge.exceptions import UnsupportedColumnTypeError
from dataforge.types import ColumnType, Driver


def _id_column() -> ColumnDefinition:
    return ColumnDefinition(
        name="id", type=ColumnType.INTEGER, primary_key=True, auto_increment=True
    )


def test_quote_string() -> None:
    """Test embedded quotes are doubled."""
    assert quote_string("it's") == "'it''s'"


@pytest.mark.parametrize(
    "driver,expected",
    [
        (Driver.MYSQL, "id INT PRIMARY KEY AUTO_INCREMENT NOT NULL"),
        (Driver.PGSQL, "id SERIAL PRIMARY KEY"),
        (Driver.SQLITE, "id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL"),
        (Driver.SQLSRV, "id INT PRIMARY KEY IDENTITY(1,1) NOT NULL"),
    ],
)
def test_auto_increment_primary_key(driver: Driver, expected: str) -> None:
    """Test each dialect's auto-increment spelling."""
    assert get_grammar(driver).column_sql(_id_column()) == expected


def test_postgres_auto_increment_without_primary_key() -> None:
    """Test PostgreSQL drops the MySQL-only keyword."""
    column = ColumnDefinition(
        name="seq", type=ColumnType.INTEGER, auto_increment=True
    )

    assert get_grammar(Driver.PGSQL).column_sql(column) == "seq INTEGER NOT NULL"


def test_modifier_order() -> None:
    """Test nullability, default and unique render in a fixed order."""
    column = ColumnDefinition.from_mapping(
        "title",
        {
            "type": "varchar",
            "length": 50,
            "nullable": True,
            "default": "it's",
            "unique": True,
        },
    )

    assert get_grammar(Driver.MYSQL).column_sql(column) == (
        "title VARCHAR(50) NULL DEFAULT 'it''s' UNIQUE"
    )


def test_varchar_default_length() -> None:
    """Test VARCHAR falls back to 255."""
    column = ColumnDefinition(name="email", type=ColumnType.VARCHAR)

    assert get_grammar(Driver.MYSQL).column_type(column) == "VARCHAR(255)"


@pytest.mark.parametrize("driver", [Driver.MYSQL, Driver.PGSQL])
def test_decimal_precision(driver: Driver) -> None:
    """Test DECIMAL renders precision and scale or the 10,2 fallback."""
    grammar = get_grammar(driver)

    explicit = ColumnDefinition(
        name="price", type=ColumnType.DECIMAL, precision=8, scale=3
    )
    fallback = ColumnDefinition(name="price", type=ColumnType.DECIMAL, precision=8)

    assert grammar.column_type(explicit) == "DECIMAL(8,3)"
    assert grammar.column_type(fallback) == "DECIMAL(10,2)"


@pytest.mark.parametrize(
    "driver,boolean,json",
    [
        (Driver.MYSQL, "TINYINT(1)", "JSON"),
        (Driver.PGSQL, "BOOLEAN", "JSONB"),
        (Driver.SQLITE, "BOOLEAN", "TEXT"),
        (Driver.SQLSRV, "BIT", "NVARCHAR(MAX)"),
    ],
)
def test_native_types(driver: Driver, boolean: str, json: str) -> None:
    """Test boolean and json mappings per dialect."""
    grammar = get_grammar(driver)

    assert grammar.column_type(ColumnDefinition("flag", ColumnType.BOOLEAN)) == boolean
    assert grammar.column_type(ColumnDefinition("meta", ColumnType.JSON)) == json


def test_boolean_default_literals() -> None:
    """Test boolean defaults are dialect literals."""
    column = ColumnDefinition(name="active", type=ColumnType.BOOLEAN, default=True)

    assert get_grammar(Driver.MYSQL).column_sql(column).endswith("DEFAULT 1")
    assert get_grammar(Driver.PGSQL).column_sql(column).endswith("DEFAULT TRUE")


def test_enum_mysql_only() -> None:
    """Test ENUM renders on MySQL and is rejected elsewhere."""
    column = ColumnDefinition(
        name="status", type=ColumnType.ENUM, values=["draft", "published"]
    )

    assert get_grammar(Driver.MYSQL).column_type(column) == (
        "ENUM('draft','published')"
    )
    with pytest.raises(UnsupportedColumnTypeError, match="enum"):
        get_grammar(Driver.PGSQL).column_type(column)


def test_unknown_type_in_mapping() -> None:
    """Test unknown logical types are rejected at definition time."""
    with pytest.raises(UnsupportedColumnTypeError):
        ColumnDefinition.from_mapping("blob", {"type": "geometry"})


def test_create_table_with_foreign_key() -> None:
    """Test foreign keys render as trailing table constraints."""
    columns = [
        _id_column(),
        ColumnDefinition.from_mapping(
            "user_id", {"type": "integer", "foreign": {"table": "users"}}
        ),
    ]

    assert get_grammar(Driver.SQLITE).create_table_sql("posts", columns) == (
        "CREATE TABLE IF NOT EXISTS posts ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL, "
        "user_id INTEGER NOT NULL, "
        "FOREIGN KEY (user_id) REFERENCES users(id))"
    )


def test_foreign_key_custom_column() -> None:
    """Test the referenced column can be overridden."""
    column = ColumnDefinition.from_mapping(
        "owner", {"type": "varchar", "foreign": {"table": "users", "column": "email"}}
    )

    assert get_grammar(Driver.MYSQL).foreign_key_sql(column) == (
        "FOREIGN KEY (owner) REFERENCES users(email)"
    )


def test_create_index_name() -> None:
    """Test index names are derived from table and columns."""
    assert get_grammar(Driver.MYSQL).create_index_sql("users", ["first", "last"]) == (
        "CREATE INDEX users_first_last_idx ON users (first, last)"
    )
