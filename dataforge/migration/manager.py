"""Run migration definitions against a connection."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from dataforge.database.connection import Connection
from dataforge.database.query_builder import QueryBuilder
from dataforge.log import get_logger
from dataforge.migration.schema import Schema
from dataforge.migration.table_builder import TableBuilder

logger = get_logger(__name__)


class Migration(ABC):
    """A unit of schema change for one table.

    Subclasses may also define ``seed(query_builder)`` to insert rows once
    the table exists.
    """

    @abstractmethod
    def get_table_name(self) -> str:
        """Name of the table this migration targets."""
        pass

    @abstractmethod
    def up(self, schema: Schema) -> None:
        """Declare columns and alterations on a fresh schema."""
        pass


@dataclass
class MigrationResult:
    """Outcome of one migration run."""

    table: str
    created: bool = False
    modifications: list[str] = field(default_factory=list)
    seeded: int | None = None


class MigrationManager:
    """Apply migrations in order; failures abort the run and propagate.

    Nothing is rolled back: DDL already applied by a failed migration, or by
    earlier migrations in the same run, stays in place.
    """

    def __init__(self, connection: Connection) -> None:
        self.connection = connection

    def migrate(self, migrations: Iterable[Migration]) -> list[MigrationResult]:
        """Run every migration in sequence.

        Args:
            migrations: Objects exposing get_table_name(), up(schema) and
                optionally seed(query_builder)

        Returns:
            One result per migration, in order
        """
        return [self.run_migration(migration) for migration in migrations]

    def run_migration(self, migration: Migration) -> MigrationResult:
        """Run a single migration.

        Raises:
            TypeError: If the migration does not define get_table_name()
        """
        if not callable(getattr(migration, "get_table_name", None)):
            raise TypeError(
                f"{type(migration).__name__} must define get_table_name()"
            )

        table = migration.get_table_name()
        schema = Schema(table)
        migration.up(schema)

        builder = TableBuilder(table, self.connection.get_query_builder())
        result = MigrationResult(table=table)

        try:
            if schema.get_structure():
                builder.build(schema)
                result.created = True
                logger.info(f"✓ Table '{table}' created")

            modifications = schema.get_modifications()
            if modifications:
                builder.modify(modifications)
                for modification in modifications:
                    line = f"'{table}': {modification.describe()}"
                    result.modifications.append(line)
                    logger.info(f"✓ {line}")

            seed = getattr(migration, "seed", None)
            if callable(seed):
                result.seeded = self._seed(table, seed)
        except Exception as e:
            logger.error(f"✗ Migration for '{table}' failed: {e}")
            raise

        return result

    def _seed(self, table: str, seed: Callable[[QueryBuilder], Any]) -> int:
        """Invoke a seed step and report how many rows it added."""
        try:
            before = self.connection.get_query_builder().table(table).count()
            seed(self.connection.get_query_builder())
            after = self.connection.get_query_builder().table(table).count()
        except Exception as e:
            logger.error(f"✗ Seeding '{table}' failed: {e}")
            raise

        inserted = after - before
        if inserted > 0:
            logger.info(f"✓ Seeded {inserted} rows into '{table}'")
        return inserted
