"""
Integration tests for the asyncpg repositories against a real PostgreSQL.

Requires Docker. Run with ``pytest -m integration``.
"""

import asyncpg
import pytest
from contextlib import asynccontextmanager
from decimal import Decimal
from testcontainers.postgres import PostgresContainer

from brewery_api.src.bootstrap import load_seed_data
from brewery_api.src.database import check_database, create_schema
from brewery_api.src.models.beer import BeerEntity
from brewery_api.src.models.customer import CustomerEntity
from brewery_api.src.repositories.beer_repo import BeerRepository
from brewery_api.src.repositories.customer_repo import CustomerRepository

pytestmark = pytest.mark.integration


# ============================================================================
# PYTEST FIXTURES
# ============================================================================


@pytest.fixture(scope="module")
def postgres_dsn():
    """Start a PostgreSQL testcontainer and return its asyncpg DSN."""
    with PostgresContainer("postgres:16-alpine", driver=None) as postgres:
        yield postgres.get_connection_url()


@asynccontextmanager
async def repositories(dsn: str):
    """Fresh schema plus both repositories over a short-lived pool."""
    pool = await asyncpg.create_pool(dsn, min_size=1, max_size=4)
    try:
        async with pool.acquire() as conn:
            await conn.execute("DROP TABLE IF EXISTS beer, customer")
        await create_schema(pool)
        yield BeerRepository(pool, fetch_size=2), CustomerRepository(pool, fetch_size=2)
    finally:
        await pool.close()


def beer(**overrides) -> BeerEntity:
    values = {
        "beer_name": "Galaxy Cat",
        "beer_style": "Pale Ale",
        "upc": "12356",
        "quantity_on_hand": 122,
        "price": Decimal("12.99"),
    }
    values.update(overrides)
    return BeerEntity(**values)


# ============================================================================
# INTEGRATION TESTS
# ============================================================================


class TestSchema:

    @pytest.mark.asyncio
    async def test_create_schema_is_idempotent(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, _):
            await create_schema(beer_repo.pool)

            assert "PostgreSQL" in await check_database(beer_repo.pool)
            assert await beer_repo.count() == 0


class TestBeerRepository:

    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_timestamps(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, _):
            saved = await beer_repo.save(beer())

            assert saved.id == 1
            assert saved.created_date is not None
            assert saved.last_modified_date == saved.created_date
            assert saved.price == Decimal("12.99")
            assert await beer_repo.find_by_id(1) == saved

    @pytest.mark.asyncio
    async def test_update_advances_last_modified_only(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, _):
            saved = await beer_repo.save(beer())

            updated = await beer_repo.save(saved.model_copy(update={"beer_name": "Crank"}))
            again = await beer_repo.save(updated)

            assert updated.beer_name == "Crank"
            assert updated.created_date == saved.created_date
            assert updated.last_modified_date > saved.last_modified_date
            assert again.last_modified_date > updated.last_modified_date

    @pytest.mark.asyncio
    async def test_update_missing_row(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, _):
            assert await beer_repo.save(beer(id=666)) is None
            assert await beer_repo.count() == 0

    @pytest.mark.asyncio
    async def test_find_all_streams_in_id_order(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, _):
            for name in ("A", "B", "C", "D", "E"):
                await beer_repo.save(beer(beer_name=name))

            names = [b.beer_name async for b in beer_repo.find_all()]

            assert names == ["A", "B", "C", "D", "E"]

    @pytest.mark.asyncio
    async def test_abandoned_stream_returns_connection(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, _):
            for name in ("A", "B", "C"):
                await beer_repo.save(beer(beer_name=name))

            stream = beer_repo.find_all()
            await stream.__anext__()
            await stream.aclose()

            assert beer_repo.pool.get_idle_size() == beer_repo.pool.get_size()
            assert await beer_repo.count() == 3

    @pytest.mark.asyncio
    async def test_delete(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, _):
            saved = await beer_repo.save(beer())

            assert await beer_repo.delete_by_id(saved.id) is True
            assert await beer_repo.delete_by_id(saved.id) is False
            assert await beer_repo.find_by_id(saved.id) is None


class TestCustomerRepository:

    @pytest.mark.asyncio
    async def test_crud(self, postgres_dsn):
        async with repositories(postgres_dsn) as (_, customer_repo):
            saved = await customer_repo.save(CustomerEntity(customer_name="Joselito"))

            assert saved.email is None

            updated = await customer_repo.save(
                saved.model_copy(update={"email": "Joselito@google.com"})
            )

            assert (await customer_repo.find_by_id(saved.id)).email == "Joselito@google.com"
            assert updated.last_modified_date > saved.last_modified_date
            assert await customer_repo.delete_by_id(saved.id) is True

    @pytest.mark.asyncio
    async def test_seed_data(self, postgres_dsn):
        async with repositories(postgres_dsn) as (beer_repo, customer_repo):
            await load_seed_data(beer_repo, customer_repo)
            await load_seed_data(beer_repo, customer_repo)

            assert await beer_repo.count() == 3
            assert await customer_repo.count() == 2
