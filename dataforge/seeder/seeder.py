"""Base class for seeders."""

from abc import ABC, abstractmethod

from dataforge.database.connection import Connection
from dataforge.seeder.factory import Factory


class Seeder(ABC):
    """Populate tables with generated data.

    Subclasses implement run() and usually call ``self.factory.create``.
    """

    def __init__(self, connection: Connection) -> None:
        self.connection = connection
        self.factory = Factory(connection)

    @abstractmethod
    def run(self) -> None:
        """Insert the seed data."""
        pass
