"""Column definition data used by table creation and migrations."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from dataforge.exceptions import UnsupportedColumnTypeError
from dataforge.types import ColumnType


@dataclass
class ColumnDefinition:
    """Database column definition."""

    name: str
    type: ColumnType
    length: int | None = None
    precision: int | None = None
    scale: int | None = None
    values: list[str] = field(default_factory=list)
    nullable: bool = False
    unique: bool = False
    default: Any = None
    primary_key: bool = False
    auto_increment: bool = False
    foreign_table: str | None = None
    foreign_column: str | None = None

    @property
    def has_foreign_key(self) -> bool:
        return self.foreign_table is not None

    @classmethod
    def from_mapping(cls, name: str, definition: Mapping[str, Any]) -> "ColumnDefinition":
        """Build a definition from a plain mapping.

        Accepts both snake_case keys and the camelCase keys used by
        hand-written table definitions (``primaryKey``, ``autoIncrement``,
        ``foreign``).

        Raises:
            UnsupportedColumnTypeError: If the type is not a known column type
        """
        try:
            column_type = ColumnType(definition["type"])
        except (KeyError, ValueError) as e:
            raise UnsupportedColumnTypeError(
                f"Unsupported column type for '{name}': {definition.get('type')}"
            ) from e

        foreign = definition.get("foreign") or {}
        return cls(
            name=name,
            type=column_type,
            length=definition.get("length"),
            precision=definition.get("precision"),
            scale=definition.get("scale"),
            values=list(definition.get("values", [])),
            nullable=bool(definition.get("nullable", False)),
            unique=bool(definition.get("unique", False)),
            default=definition.get("default"),
            primary_key=bool(
                definition.get("primary_key", definition.get("primaryKey", False))
            ),
            auto_increment=bool(
                definition.get(
                    "auto_increment", definition.get("autoIncrement", False)
                )
            ),
            foreign_table=definition.get("foreign_table", foreign.get("table")),
            foreign_column=definition.get(
                "foreign_column", foreign.get("column", "id") if foreign else None
            ),
        )


def to_column_definitions(
    columns: Mapping[str, "ColumnDefinition | Mapping[str, Any]"],
) -> list[ColumnDefinition]:
    """Normalize a name-keyed column mapping into definitions, keeping order."""
    return [
        column
        if isinstance(column, ColumnDefinition)
        else ColumnDefinition.from_mapping(name, column)
        for name, column in columns.items()
    ]
