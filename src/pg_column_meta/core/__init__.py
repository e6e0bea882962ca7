"""Core database operations layer."""

from .connection import DatabaseConnection
from .inspector import ColumnInspector

__all__ = [
    "DatabaseConnection",
    "ColumnInspector",
]
