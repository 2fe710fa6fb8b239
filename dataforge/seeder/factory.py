"""Bulk record generation for seeding."""

from collections.abc import Callable, Mapping
from typing import Any

from faker import Faker

from dataforge.database.connection import Connection
from dataforge.log import get_logger

logger = get_logger(__name__)

RecordDefinition = Callable[[Faker], Mapping[str, Any]]


class Factory:
    """Generate records with Faker and insert them in one statement."""

    def __init__(self, connection: Connection, faker: Faker | None = None) -> None:
        """Initialize the factory.

        Args:
            connection: Connection the records are inserted through
            faker: Fake data generator; a default Faker() when omitted
        """
        self.connection = connection
        self.faker = faker or Faker()

    def create(self, table: str, definition: RecordDefinition, count: int = 1) -> bool:
        """Call definition(faker) count times and bulk-insert the records.

        Returns:
            False when count is not positive and nothing was inserted
        """
        records = [definition(self.faker) for _ in range(count)]
        inserted = (
            self.connection.get_query_builder().table(table).insert_multiple(records)
        )
        if inserted:
            logger.debug(f"Factory inserted {len(records)} rows into {table}")
        return inserted
