"""PostgreSQL column metadata MCP server

A Model Context Protocol (MCP) server that describes PostgreSQL table columns:
normalized types, defaults, and serial, generated and array flags.
"""

import asyncio
import json
import logging
import os
from typing import Any, Optional

import orjson
from dotenv import load_dotenv
from mcp.server import Server
from mcp.types import TextContent, Tool

from pg_column_meta.core import ColumnInspector, DatabaseConnection
from pg_column_meta.models.config import DatabaseConfig
from pg_column_meta.utils.serialization import dumps_columns

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Response size limits (in characters) for MCP tool responses
MAX_RESPONSE_LIST_TABLES = 5000
MAX_RESPONSE_DESCRIBE_COLUMNS = 8000


def truncate_json_response(data: str, max_length: int) -> str:
    """
    Truncate JSON response to a maximum length.

    Args:
        data: JSON string to truncate
        max_length: Maximum length in characters

    Returns:
        Truncated JSON string with truncation notice if needed
    """
    if len(data) <= max_length:
        return data

    truncation_msg = f"\n\n... [Response truncated: {len(data)} chars -> {max_length} chars to preserve context window]"
    available_length = max_length - len(truncation_msg)

    if available_length < 100:
        return json.dumps(
            {
                "error": "Response too large",
                "original_size": len(data),
                "limit": max_length,
                "message": "Response exceeds size limit. Please describe a narrower table.",
            },
            indent=2,
        )

    truncated = data[:available_length]

    # Cut at a line end when one is close to the limit
    last_newline = truncated.rfind("\n")
    if last_newline > available_length * 0.8:
        truncated = truncated[:last_newline]

    return truncated + truncation_msg


class ColumnMetadataServer:
    """MCP server exposing column introspection tools."""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize column metadata server.

        Args:
            config: Database configuration
        """
        self.config = config
        self.connection = DatabaseConnection(config)
        self.inspector: Optional[ColumnInspector] = None
        self.server = Server("pg-column-meta")

    async def initialize(self) -> None:
        """Initialize all components."""
        await self.connection.initialize()
        self.inspector = ColumnInspector(self.connection)
        logger.info(f"Initialized column metadata server for {self.config.database}")

    def _create_list_tables_tool(self) -> Tool:
        """Create list_tables tool."""
        return Tool(
            name="list_tables",
            description="List all tables in a schema",
            inputSchema={
                "type": "object",
                "properties": {
                    "schema": {
                        "type": "string",
                        "description": "Schema name (optional, uses default if not specified)",
                    },
                },
                "required": [],
            },
        )

    def _create_describe_columns_tool(self) -> Tool:
        """Create describe_columns tool."""
        return Tool(
            name="describe_columns",
            description=(
                "Describe table columns: normalized SQL type, type oid and modifier, "
                "defaults, and serial, virtual (generated) and array flags"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "table": {"type": "string", "description": "Table name"},
                    "schema": {
                        "type": "string",
                        "description": "Schema name (optional)",
                    },
                },
                "required": ["table"],
            },
        )

    def list_tools(self) -> list[Tool]:
        return [
            self._create_list_tables_tool(),
            self._create_describe_columns_tool(),
        ]

    async def handle_list_tables(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle list_tables request."""
        assert self.inspector is not None

        tables = await self.inspector.get_tables(arguments.get("schema"))

        response = orjson.dumps(tables, option=orjson.OPT_INDENT_2).decode("utf-8")
        return [
            TextContent(
                type="text",
                text=truncate_json_response(response, MAX_RESPONSE_LIST_TABLES),
            )
        ]

    async def handle_describe_columns(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle describe_columns request."""
        assert self.inspector is not None

        table = arguments["table"]
        schema = arguments.get("schema")

        columns = await self.inspector.get_columns(table, schema)

        response = dumps_columns(columns)
        return [
            TextContent(
                type="text",
                text=truncate_json_response(response, MAX_RESPONSE_DESCRIBE_COLUMNS),
            )
        ]

    async def call_tool(
        self, name: str, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Dispatch a tool call to its handler."""
        handlers = {
            "list_tables": self.handle_list_tables,
            "describe_columns": self.handle_describe_columns,
        }

        handler = handlers.get(name)
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")

        return await handler(arguments)

    async def cleanup(self) -> None:
        """Cleanup resources."""
        await self.connection.dispose()
        logger.info("Column metadata server cleaned up")


async def main() -> None:
    """Main entry point for the MCP server."""
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable must be set")

    config = DatabaseConfig(url=database_url)
    mcp_server = ColumnMetadataServer(config)

    try:
        await mcp_server.initialize()

        @mcp_server.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return mcp_server.list_tools()

        @mcp_server.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await mcp_server.call_tool(name, arguments)

        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await mcp_server.server.run(
                read_stream,
                write_stream,
                mcp_server.server.create_initialization_options(),
            )

    finally:
        await mcp_server.cleanup()


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'pg-column-meta' console script.
    """
    # Windows-specific event loop policy
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli_entry()
