"""Schema migrations."""

from .manager import Migration, MigrationManager, MigrationResult
from .schema import (
    AddColumn,
    ChangeColumn,
    CreateIndex,
    DropColumn,
    Modification,
    RenameColumn,
    Schema,
)
from .table_builder import TableBuilder

__all__ = [
    "Migration",
    "MigrationManager",
    "MigrationResult",
    "Schema",
    "TableBuilder",
    "Modification",
    "AddColumn",
    "ChangeColumn",
    "DropColumn",
    "RenameColumn",
    "CreateIndex",
]
