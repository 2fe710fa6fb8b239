"""Seeding helpers."""

from .factory import Factory
from .seeder import Seeder

__all__ = ["Factory", "Seeder"]
