"""JSON export of column descriptors using orjson."""

from typing import Any, Iterable

import orjson

from pg_column_meta.models.column import PostgresColumn


def column_to_dict(column: PostgresColumn) -> dict[str, Any]:
    """Flatten a descriptor into the fields schema consumers read."""
    return {
        "name": column.name,
        "sql_type": column.sql_type,
        "raw_sql_type": column.sql_type_metadata.sql_type,
        "type": column.type,
        "oid": column.oid,
        "fmod": column.fmod,
        "limit": column.limit,
        "precision": column.precision,
        "scale": column.scale,
        "null": column.null,
        "default": column.default,
        "default_function": column.default_function,
        "has_default": column.has_default(),
        "serial": column.is_serial(),
        "virtual": column.is_virtual(),
        "array": column.is_array(),
        "collation": column.collation,
        "comment": column.comment,
    }


def dumps_columns(columns: Iterable[PostgresColumn]) -> str:
    """Serialize descriptors to an indented JSON array."""
    payload = [column_to_dict(column) for column in columns]
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8")
