"""
Customer repository for database operations.

Provides async CRUD operations for customers using asyncpg with PostgreSQL.
"""

import asyncpg
import structlog
from typing import AsyncIterator, Optional

from brewery_api.src.models.customer import CustomerEntity

logger = structlog.get_logger(__name__)

_COLUMNS = "id, customer_name, email, created_date, last_modified_date"


class CustomerRepository:
    """Repository for customer database operations."""

    def __init__(self, pool: asyncpg.Pool, fetch_size: int = 50):
        """
        Initialize customer repository.

        Args:
            pool: asyncpg connection pool
            fetch_size: Rows prefetched per round trip by ``find_all``
        """
        self.pool = pool
        self.fetch_size = fetch_size

    async def find_by_id(self, customer_id: int) -> Optional[CustomerEntity]:
        """
        Get customer by ID.

        Args:
            customer_id: Customer ID

        Returns:
            Customer or None if not found
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {_COLUMNS}
                    FROM customer
                    WHERE id = $1
                    """,
                    customer_id
                )

                if not row:
                    logger.debug("customer_row_not_found", customer_id=customer_id)
                    return None

                return CustomerEntity(**dict(row))

        except Exception as e:
            logger.error("customer_find_by_id_failed", error=str(e), customer_id=customer_id)
            raise

    async def find_all(self) -> AsyncIterator[CustomerEntity]:
        """
        Stream all customers ordered by ID through a server-side cursor.

        Yields:
            Customers in ID order
        """
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    async for row in conn.cursor(
                        f"""
                        SELECT {_COLUMNS}
                        FROM customer
                        ORDER BY id
                        """,
                        prefetch=self.fetch_size
                    ):
                        yield CustomerEntity(**dict(row))

        except asyncpg.PostgresError as e:
            logger.error("customer_find_all_failed", error=str(e))
            raise

    async def save(self, customer: CustomerEntity) -> Optional[CustomerEntity]:
        """
        Insert a new customer (no ``id``) or update an existing one.

        Args:
            customer: Customer to persist

        Returns:
            The stored customer, or None if an update targeted a missing row
        """
        try:
            async with self.pool.acquire() as conn:
                if customer.id is None:
                    row = await conn.fetchrow(
                        f"""
                        INSERT INTO customer (customer_name, email, created_date, last_modified_date)
                        VALUES ($1, $2, clock_timestamp(), clock_timestamp())
                        RETURNING {_COLUMNS}
                        """,
                        customer.customer_name,
                        customer.email
                    )
                    logger.info(
                        "customer_inserted",
                        customer_id=row["id"],
                        customer_name=customer.customer_name
                    )
                else:
                    row = await conn.fetchrow(
                        f"""
                        UPDATE customer
                        SET customer_name = $1,
                            email = $2,
                            last_modified_date = GREATEST(
                                clock_timestamp(),
                                last_modified_date + INTERVAL '1 microsecond'
                            )
                        WHERE id = $3
                        RETURNING {_COLUMNS}
                        """,
                        customer.customer_name,
                        customer.email,
                        customer.id
                    )

                    if not row:
                        logger.debug("customer_row_not_found", customer_id=customer.id)
                        return None

                    logger.info("customer_row_updated", customer_id=customer.id)

                return CustomerEntity(**dict(row))

        except Exception as e:
            logger.error("customer_save_failed", error=str(e), customer_id=customer.id)
            raise

    async def delete_by_id(self, customer_id: int) -> bool:
        """
        Delete customer.

        Args:
            customer_id: Customer ID

        Returns:
            True if deleted, False if not found
        """
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(
                    """
                    DELETE FROM customer
                    WHERE id = $1
                    """,
                    customer_id
                )

                deleted = result.split()[-1] == "1"

                if deleted:
                    logger.info("customer_row_deleted", customer_id=customer_id)
                else:
                    logger.debug("customer_row_not_found", customer_id=customer_id)

                return deleted

        except Exception as e:
            logger.error("customer_delete_failed", error=str(e), customer_id=customer_id)
            raise

    async def count(self) -> int:
        """Count stored customers."""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchval("SELECT COUNT(*) FROM customer")

        except Exception as e:
            logger.error("customer_count_failed", error=str(e))
            raise
