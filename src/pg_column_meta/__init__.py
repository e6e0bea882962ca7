"""
pg_column_meta - PostgreSQL column metadata descriptors

Read-only descriptors for PostgreSQL table columns with serial, generated
(virtual) and array detection, plus catalog introspection and an MCP server.
"""

__version__ = "0.1.0"

from pg_column_meta.models.column import Column, PostgresColumn, TypeMetadata
from pg_column_meta.models.config import DatabaseConfig

__all__ = [
    "Column",
    "PostgresColumn",
    "TypeMetadata",
    "DatabaseConfig",
]
