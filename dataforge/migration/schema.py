"""Declarative table description used inside migrations."""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, TypeAlias

from dataforge.database.definitions import ColumnDefinition
from dataforge.exceptions import SchemaUsageError
from dataforge.types import ColumnType, ModificationType


@dataclass
class AddColumn:
    """Add a column to an existing table, optionally after another one."""

    type: ClassVar[ModificationType] = ModificationType.ADD

    column: ColumnDefinition
    after: str | None = None

    def describe(self) -> str:
        return f"added column '{self.column.name}'"


@dataclass
class ChangeColumn:
    """Redefine an existing column."""

    type: ClassVar[ModificationType] = ModificationType.CHANGE

    column: ColumnDefinition
    after: str | None = None

    def describe(self) -> str:
        return f"changed column '{self.column.name}'"


@dataclass
class DropColumn:
    type: ClassVar[ModificationType] = ModificationType.DROP

    column: str

    def describe(self) -> str:
        return f"dropped column '{self.column}'"


@dataclass
class RenameColumn:
    type: ClassVar[ModificationType] = ModificationType.RENAME

    from_column: str
    to_column: str

    def describe(self) -> str:
        return f"renamed column '{self.from_column}' to '{self.to_column}'"


@dataclass
class CreateIndex:
    type: ClassVar[ModificationType] = ModificationType.INDEX

    columns: list[str] = field(default_factory=list)

    def describe(self) -> str:
        return f"created index on {', '.join(self.columns)}"


Modification: TypeAlias = AddColumn | ChangeColumn | DropColumn | RenameColumn | CreateIndex


class Schema:
    """Collect the columns and alterations a migration declares.

    Column methods (``integer``, ``string``, ...) add an entry to the table
    structure and make it the current column. Modifier methods
    (``nullable``, ``unique``, ``default``, ...) then apply to that column.

        >>> schema.integer("id").primary_key().auto_increment()
        >>> schema.string("email").unique()
        >>> schema.string("nickname", 50).nullable().after("email")

    ``after`` moves the current column out of the structure and queues it as
    an ADD COLUMN alteration instead.
    """

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        self._structure: dict[str, ColumnDefinition] = {}
        self._modifications: list[Modification] = []
        self._current: ColumnDefinition | None = None

    def _column(self, name: str, column_type: ColumnType, **attributes: Any) -> "Schema":
        column = ColumnDefinition(name=name, type=column_type, **attributes)
        self._structure[name] = column
        self._current = column
        return self

    def integer(self, name: str) -> "Schema":
        return self._column(name, ColumnType.INTEGER)

    def string(self, name: str, length: int = 255) -> "Schema":
        return self._column(name, ColumnType.VARCHAR, length=length)

    def text(self, name: str) -> "Schema":
        return self._column(name, ColumnType.TEXT)

    def timestamp(self, name: str) -> "Schema":
        return self._column(name, ColumnType.TIMESTAMP)

    def datetime(self, name: str) -> "Schema":
        return self._column(name, ColumnType.DATETIME)

    def date(self, name: str) -> "Schema":
        return self._column(name, ColumnType.DATE)

    def decimal(self, name: str, precision: int = 10, scale: int = 2) -> "Schema":
        return self._column(
            name, ColumnType.DECIMAL, precision=precision, scale=scale
        )

    def boolean(self, name: str) -> "Schema":
        return self._column(name, ColumnType.BOOLEAN)

    def json(self, name: str) -> "Schema":
        return self._column(name, ColumnType.JSON)

    def enum(self, name: str, values: Sequence[str]) -> "Schema":
        return self._column(name, ColumnType.ENUM, values=list(values))

    def _require_current(self, modifier: str) -> ColumnDefinition:
        if self._current is None:
            raise SchemaUsageError(
                f"{modifier}() called before any column was declared "
                f"on '{self.table_name}'"
            )
        return self._current

    def nullable(self) -> "Schema":
        self._require_current("nullable").nullable = True
        return self

    def unique(self) -> "Schema":
        self._require_current("unique").unique = True
        return self

    def default(self, value: Any) -> "Schema":
        self._require_current("default").default = value
        return self

    def primary_key(self) -> "Schema":
        self._require_current("primary_key").primary_key = True
        return self

    def auto_increment(self) -> "Schema":
        self._require_current("auto_increment").auto_increment = True
        return self

    def foreign_key(self, table: str, column: str = "id") -> "Schema":
        current = self._require_current("foreign_key")
        current.foreign_table = table
        current.foreign_column = column
        return self

    def after(self, column_name: str) -> "Schema":
        """Queue the current column as ADD COLUMN ... AFTER column_name."""
        current = self._require_current("after")
        self._structure.pop(current.name, None)
        self._modifications.append(AddColumn(current, after=column_name))
        return self

    def change(self, after: str | None = None) -> "Schema":
        """Queue a redefinition of the current column.

        The column stays in the structure. The queued change is a snapshot
        taken now; modifiers called afterwards only affect the structure.
        """
        current = self._require_current("change")
        snapshot = replace(current, values=list(current.values))
        self._modifications.append(ChangeColumn(snapshot, after=after))
        return self

    def drop_column(self, name: str) -> "Schema":
        self._modifications.append(DropColumn(name))
        return self

    def rename_column(self, from_column: str, to_column: str) -> "Schema":
        self._modifications.append(RenameColumn(from_column, to_column))
        return self

    def index(self, columns: str | Sequence[str]) -> "Schema":
        """Queue an index over one or more columns."""
        names = [columns] if isinstance(columns, str) else list(columns)
        self._modifications.append(CreateIndex(names))
        return self

    def get_structure(self) -> dict[str, ColumnDefinition]:
        """Columns of the initial CREATE TABLE, in declaration order."""
        return dict(self._structure)

    def get_modifications(self) -> list[Modification]:
        """Queued alterations, in declaration order."""
        return list(self._modifications)
