"""Pytest configuration and shared fixtures for column metadata tests"""

import os
import sys
from typing import AsyncGenerator, Optional

import pytest
from dotenv import load_dotenv

from pg_column_meta.core import ColumnInspector, DatabaseConnection
from pg_column_meta.models.column import PostgresColumn, TypeMetadata
from pg_column_meta.models.config import DatabaseConfig

# Load environment variables
load_dotenv()

# Fix for Windows: asyncpg requires SelectorEventLoop on Windows
if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore[attr-defined]


# ==================== Descriptor Fixtures ====================


@pytest.fixture
def make_column():
    """Factory for PostgreSQL column descriptors"""

    def _make(
        sql_type: str = "integer",
        name: str = "id",
        default: Optional[str] = None,
        default_function: Optional[str] = None,
        serial: Optional[bool] = None,
        generated: Optional[str] = None,
        oid: int = 23,
        fmod: int = -1,
        null: bool = True,
    ) -> PostgresColumn:
        return PostgresColumn(
            name=name,
            default=default,
            sql_type_metadata=TypeMetadata(sql_type=sql_type, oid=oid, fmod=fmod),
            null=null,
            default_function=default_function,
            serial=serial,
            generated=generated,
        )

    return _make


# ==================== PostgreSQL Fixtures ====================


@pytest.fixture(scope="session")
def pg_database_url() -> Optional[str]:
    """PostgreSQL test database URL from environment"""
    return os.getenv("PG_TEST_DATABASE_URL")


@pytest.fixture
async def pg_config(pg_database_url: Optional[str]) -> DatabaseConfig:
    """PostgreSQL database configuration"""
    if not pg_database_url:
        pytest.skip("PG_TEST_DATABASE_URL not set in environment")
    # DDL fixtures need a writable session
    return DatabaseConfig(url=pg_database_url, read_only=False)


@pytest.fixture
async def pg_connection(
    pg_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """PostgreSQL database connection with proper cleanup"""
    connection = DatabaseConnection(pg_config)
    await connection.initialize()
    try:
        yield connection
    finally:
        await connection.dispose()


@pytest.fixture
async def pg_inspector(pg_connection: DatabaseConnection) -> ColumnInspector:
    """PostgreSQL column inspector"""
    return ColumnInspector(pg_connection)


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
