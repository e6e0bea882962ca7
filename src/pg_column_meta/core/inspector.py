"""Column introspection against the PostgreSQL catalog."""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import text

from pg_column_meta.core.connection import DatabaseConnection
from pg_column_meta.core.defaults import (
    extract_default_function,
    extract_value_from_default,
    is_serial_default,
)
from pg_column_meta.core.types import type_metadata_from_row
from pg_column_meta.models.column import PostgresColumn

logger = logging.getLogger(__name__)

# Collation is only reported when it differs from the type's default
COLUMN_DEFINITIONS_QUERY = text("""
    SELECT
        a.attname AS name,
        format_type(a.atttypid, a.atttypmod) AS sql_type,
        pg_get_expr(d.adbin, d.adrelid) AS default_expr,
        a.attnotnull AS not_null,
        a.atttypid::bigint AS oid,
        a.atttypmod AS fmod,
        co.collname AS collation,
        col_description(a.attrelid, a.attnum) AS comment,
        a.attidentity::text AS identity,
        a.attgenerated::text AS generated
    FROM pg_catalog.pg_attribute a
    JOIN pg_catalog.pg_class c ON c.oid = a.attrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    LEFT JOIN pg_catalog.pg_attrdef d
        ON d.adrelid = a.attrelid AND d.adnum = a.attnum
    LEFT JOIN pg_catalog.pg_type t ON t.oid = a.atttypid
    LEFT JOIN pg_catalog.pg_collation co
        ON co.oid = a.attcollation AND a.attcollation <> t.typcollation
    WHERE c.relname = :table_name
      AND n.nspname = COALESCE(:schema_name, current_schema())
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
""")


class ColumnInspector:
    """Builds column descriptors from the PostgreSQL system catalog."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize column inspector.

        Args:
            connection: Database connection manager
        """
        self.connection = connection

    async def get_tables(self, schema: Optional[str] = None) -> list[str]:
        """
        List table names in a schema.

        Args:
            schema: Schema name (None for default schema)

        Returns:
            Table names
        """
        async with self.connection.get_connection() as conn:

            def get_table_names(sync_conn):
                return sa_inspect(sync_conn).get_table_names(schema=schema)

            return await conn.run_sync(get_table_names)

    async def get_columns(
        self, table_name: str, schema: Optional[str] = None
    ) -> list[PostgresColumn]:
        """
        Describe the columns of a table.

        Args:
            table_name: Table name
            schema: Schema name (None for the connection's current schema)

        Returns:
            One descriptor per live column, in attribute order

        Raises:
            LookupError: If the table does not exist or has no columns
        """
        async with self.connection.get_connection() as conn:
            result = await conn.execute(
                COLUMN_DEFINITIONS_QUERY,
                {"table_name": table_name, "schema_name": schema},
            )
            rows = result.mappings().all()

        if not rows:
            qualified = f"{schema}.{table_name}" if schema else table_name
            raise LookupError(f"Table '{qualified}' not found or has no columns")

        columns = [self.build_column(table_name, row) for row in rows]
        logger.debug(f"Described {len(columns)} columns of {table_name}")
        return columns

    def build_column(self, table_name: str, row: Mapping[str, Any]) -> PostgresColumn:
        """Convert one column definition row into a descriptor."""
        name = row["name"]
        default = row["default_expr"]
        generated = row.get("generated") or ""
        identity = row.get("identity") or ""

        default_value = extract_value_from_default(default)
        if generated:
            # pg_attrdef holds the generation expression for generated columns
            default_function = default
        else:
            default_function = extract_default_function(default_value, default)

        serial = bool(identity) or is_serial_default(
            table_name, name, default_function
        )

        return PostgresColumn(
            name=name,
            default=default_value,
            sql_type_metadata=type_metadata_from_row(
                row["sql_type"], int(row["oid"]), int(row["fmod"])
            ),
            null=not row["not_null"],
            default_function=default_function,
            collation=row.get("collation"),
            comment=row.get("comment") or None,
            serial=serial,
            generated=generated,
        )
