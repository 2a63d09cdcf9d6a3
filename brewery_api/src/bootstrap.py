"""
Sample data loaded into empty tables at startup.

Goes through the repositories so seeded rows get store-assigned IDs and
timestamps like any other row.
"""

from decimal import Decimal

import structlog

from brewery_api.src.models.beer import BeerEntity
from brewery_api.src.models.customer import CustomerEntity
from brewery_api.src.repositories.beer_repo import BeerRepository
from brewery_api.src.repositories.customer_repo import CustomerRepository

logger = structlog.get_logger(__name__)

SAMPLE_BEERS = (
    BeerEntity(
        beer_name="Galaxy Cat",
        beer_style="Pale Ale",
        upc="12356",
        quantity_on_hand=122,
        price=Decimal("12.99"),
    ),
    BeerEntity(
        beer_name="Crank",
        beer_style="Pale Ale",
        upc="12356222",
        quantity_on_hand=392,
        price=Decimal("11.99"),
    ),
    BeerEntity(
        beer_name="Sunshine City",
        beer_style="IPA",
        upc="12356",
        quantity_on_hand=144,
        price=Decimal("13.99"),
    ),
)

SAMPLE_CUSTOMERS = (
    CustomerEntity(customer_name="Customer 1", email="customer1@example.com"),
    CustomerEntity(customer_name="Customer 2", email="customer2@example.com"),
)


async def load_beer_data(beer_repo: BeerRepository) -> int:
    """Insert the sample beers if the table is empty. Returns rows inserted."""
    if await beer_repo.count() > 0:
        return 0

    for beer in SAMPLE_BEERS:
        await beer_repo.save(beer)

    logger.info("beer_seed_loaded", count=len(SAMPLE_BEERS))
    return len(SAMPLE_BEERS)


async def load_customer_data(customer_repo: CustomerRepository) -> int:
    """Insert the sample customers if the table is empty. Returns rows inserted."""
    if await customer_repo.count() > 0:
        return 0

    for customer in SAMPLE_CUSTOMERS:
        await customer_repo.save(customer)

    logger.info("customer_seed_loaded", count=len(SAMPLE_CUSTOMERS))
    return len(SAMPLE_CUSTOMERS)


async def load_seed_data(
    beer_repo: BeerRepository,
    customer_repo: CustomerRepository
) -> None:
    await load_beer_data(beer_repo)
    await load_customer_data(customer_repo)
