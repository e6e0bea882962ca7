"""Pydantic models for column metadata and configuration."""

from .column import Column, PostgresColumn, TypeMetadata
from .config import DatabaseConfig

__all__ = [
    "Column",
    "PostgresColumn",
    "TypeMetadata",
    "DatabaseConfig",
]
