"""Utility modules for column metadata export."""

from pg_column_meta.utils.serialization import column_to_dict, dumps_columns

__all__ = [
    "column_to_dict",
    "dumps_columns",
]
