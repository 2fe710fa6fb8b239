"""Database access: connection, query builder, grammar and introspection."""

from .connection import Connection, build_url
from .definitions import ColumnDefinition
from .grammar import ColumnGrammar, get_grammar
from .introspection import ColumnInfo, ColumnInspector, get_inspector
from .query_builder import QueryBuilder

__all__ = [
    "Connection",
    "build_url",
    "QueryBuilder",
    "ColumnDefinition",
    "ColumnGrammar",
    "get_grammar",
    "ColumnInfo",
    "ColumnInspector",
    "get_inspector",
]
