"""
Database pool and schema management.

The asyncpg pool is the only path to PostgreSQL. SQLAlchemy is used solely
to render the ``CREATE TABLE`` statements for the declared tables.
"""

import asyncpg
import structlog
from typing import List

from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from brewery_api.src.config import Settings
from brewery_api.src.models.common import Base
from brewery_api.src.models.beer import BeerRecord
from brewery_api.src.models.customer import CustomerRecord

logger = structlog.get_logger(__name__)

SCHEMA_TABLES = (BeerRecord.__table__, CustomerRecord.__table__)


async def create_db_pool(settings: Settings) -> asyncpg.Pool:
    """
    Create the asyncpg connection pool.

    Args:
        settings: Application settings

    Returns:
        asyncpg connection pool
    """
    try:
        pool = await asyncpg.create_pool(
            settings.database_dsn,
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            command_timeout=settings.database_command_timeout
        )

        logger.info(
            "database_pool_initialized",
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            database=settings.database_dsn.split("@")[-1]
        )

        return pool

    except Exception as e:
        logger.error("database_pool_init_failed", error=str(e))
        raise


async def check_database(pool: asyncpg.Pool) -> str:
    """
    Ping the database.

    Returns:
        PostgreSQL server version string
    """
    async with pool.acquire() as conn:
        return await conn.fetchval("SELECT version()")


def schema_statements() -> List[str]:
    """Render ``CREATE TABLE IF NOT EXISTS`` DDL for every declared table."""
    dialect = postgresql.dialect()
    return [
        str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)).strip()
        for table in Base.metadata.sorted_tables
        if table in SCHEMA_TABLES
    ]


async def create_schema(pool: asyncpg.Pool) -> None:
    """
    Create missing tables.

    Args:
        pool: asyncpg connection pool
    """
    statements = schema_statements()

    async with pool.acquire() as conn:
        async with conn.transaction():
            for statement in statements:
                await conn.execute(statement)

    logger.info("database_schema_ready", tables=[table.name for table in SCHEMA_TABLES])
