"""
Beer repository for database operations.

Provides async CRUD operations for beers using asyncpg with PostgreSQL.
Identifiers and audit timestamps are always assigned by the database.
"""

import asyncpg
import structlog
from typing import AsyncIterator, Optional

from brewery_api.src.models.beer import BeerEntity

logger = structlog.get_logger(__name__)

_COLUMNS = (
    "id, beer_name, beer_style, upc, quantity_on_hand, price, "
    "created_date, last_modified_date"
)


class BeerRepository:
    """Repository for beer database operations."""

    def __init__(self, pool: asyncpg.Pool, fetch_size: int = 50):
        """
        Initialize beer repository.

        Args:
            pool: asyncpg connection pool
            fetch_size: Rows prefetched per round trip by ``find_all``
        """
        self.pool = pool
        self.fetch_size = fetch_size

    async def find_by_id(self, beer_id: int) -> Optional[BeerEntity]:
        """
        Get beer by ID.

        Args:
            beer_id: Beer ID

        Returns:
            Beer or None if not found
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {_COLUMNS}
                    FROM beer
                    WHERE id = $1
                    """,
                    beer_id
                )

                if not row:
                    logger.debug("beer_row_not_found", beer_id=beer_id)
                    return None

                return BeerEntity(**dict(row))

        except Exception as e:
            logger.error("beer_find_by_id_failed", error=str(e), beer_id=beer_id)
            raise

    async def find_all(self) -> AsyncIterator[BeerEntity]:
        """
        Stream all beers ordered by ID.

        Rows are read through a server-side cursor, so the full table is never
        held in memory. Closing the generator early rolls back the read
        transaction and releases the connection.

        Yields:
            Beers in ID order
        """
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    async for row in conn.cursor(
                        f"""
                        SELECT {_COLUMNS}
                        FROM beer
                        ORDER BY id
                        """,
                        prefetch=self.fetch_size
                    ):
                        yield BeerEntity(**dict(row))

        except asyncpg.PostgresError as e:
            logger.error("beer_find_all_failed", error=str(e))
            raise

    async def save(self, beer: BeerEntity) -> Optional[BeerEntity]:
        """
        Insert a new beer or update an existing one.

        A beer without ``id`` is inserted. A beer with ``id`` has its mutable
        columns overwritten; ``created_date`` is never written and
        ``last_modified_date`` is moved strictly forward.

        Args:
            beer: Beer to persist

        Returns:
            The stored beer, or None if an update targeted a missing row
        """
        try:
            async with self.pool.acquire() as conn:
                if beer.id is None:
                    row = await conn.fetchrow(
                        f"""
                        INSERT INTO beer (
                            beer_name, beer_style, upc, quantity_on_hand, price,
                            created_date, last_modified_date
                        )
                        VALUES ($1, $2, $3, $4, $5, clock_timestamp(), clock_timestamp())
                        RETURNING {_COLUMNS}
                        """,
                        beer.beer_name,
                        beer.beer_style,
                        beer.upc,
                        beer.quantity_on_hand,
                        beer.price
                    )
                    logger.info("beer_inserted", beer_id=row["id"], beer_name=beer.beer_name)
                else:
                    row = await conn.fetchrow(
                        f"""
                        UPDATE beer
                        SET beer_name = $1,
                            beer_style = $2,
                            upc = $3,
                            quantity_on_hand = $4,
                            price = $5,
                            last_modified_date = GREATEST(
                                clock_timestamp(),
                                last_modified_date + INTERVAL '1 microsecond'
                            )
                        WHERE id = $6
                        RETURNING {_COLUMNS}
                        """,
                        beer.beer_name,
                        beer.beer_style,
                        beer.upc,
                        beer.quantity_on_hand,
                        beer.price,
                        beer.id
                    )

                    if not row:
                        logger.debug("beer_row_not_found", beer_id=beer.id)
                        return None

                    logger.info("beer_row_updated", beer_id=beer.id)

                return BeerEntity(**dict(row))

        except Exception as e:
            logger.error("beer_save_failed", error=str(e), beer_id=beer.id)
            raise

    async def delete_by_id(self, beer_id: int) -> bool:
        """
        Delete beer.

        Args:
            beer_id: Beer ID

        Returns:
            True if deleted, False if not found
        """
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(
                    """
                    DELETE FROM beer
                    WHERE id = $1
                    """,
                    beer_id
                )

                deleted = result.split()[-1] == "1"

                if deleted:
                    logger.info("beer_row_deleted", beer_id=beer_id)
                else:
                    logger.debug("beer_row_not_found", beer_id=beer_id)

                return deleted

        except Exception as e:
            logger.error("beer_delete_failed", error=str(e), beer_id=beer_id)
            raise

    async def count(self) -> int:
        """
        Count stored beers.

        Returns:
            Total beer count
        """
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchval("SELECT COUNT(*) FROM beer")

        except Exception as e:
            logger.error("beer_count_failed", error=str(e))
            raise
