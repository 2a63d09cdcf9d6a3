"""
Shared fixtures for unit and contract tests.

The repositories are replaced by in-memory doubles that honour the same
contract as the asyncpg implementations: store-assigned ids, strictly
increasing ``last_modified_date``, id-ordered streaming and boolean deletes.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncIterator, Dict, Optional

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

from brewery_api.src.config import Settings
from brewery_api.src.dependencies import get_beer_repository, get_customer_repository
from brewery_api.src.main import create_app
from brewery_api.src.models.beer import BeerEntity
from brewery_api.src.models.customer import CustomerEntity
from brewery_api.src.services.auth_service import TokenService


TEST_SECRET = "test-secret-key-for-brewery-api-unit-tests"


# ============================================================================
# IN-MEMORY REPOSITORY (Test Double)
# ============================================================================


class InMemoryRepository:
    """Dict-backed stand-in for ``BeerRepository`` / ``CustomerRepository``."""

    def __init__(self):
        self.rows: Dict[int, BaseModel] = {}
        self.next_id = 1
        self.clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.streams_closed = 0

    def _tick(self) -> datetime:
        self.clock += timedelta(seconds=1)
        return self.clock

    def add(self, entity: BaseModel) -> BaseModel:
        """Synchronous insert for fixtures."""
        now = self._tick()
        stored = entity.model_copy(
            update={"id": self.next_id, "created_date": now, "last_modified_date": now}
        )
        self.rows[self.next_id] = stored
        self.next_id += 1
        return stored

    async def find_by_id(self, entity_id: int) -> Optional[BaseModel]:
        return self.rows.get(entity_id)

    async def find_all(self) -> AsyncIterator[BaseModel]:
        try:
            for entity_id in sorted(self.rows):
                yield self.rows[entity_id]
        finally:
            self.streams_closed += 1

    async def save(self, entity: BaseModel) -> Optional[BaseModel]:
        if entity.id is None:
            return self.add(entity)

        existing = self.rows.get(entity.id)
        if existing is None:
            return None

        stored = entity.model_copy(
            update={
                "created_date": existing.created_date,
                "last_modified_date": self._tick(),
            }
        )
        self.rows[entity.id] = stored
        return stored

    async def delete_by_id(self, entity_id: int) -> bool:
        return self.rows.pop(entity_id, None) is not None

    async def count(self) -> int:
        return len(self.rows)


# ============================================================================
# SAMPLE DATA
# ============================================================================


def make_beer(**overrides) -> BeerEntity:
    values = {
        "beer_name": "Galaxy Cat",
        "beer_style": "Pale Ale",
        "upc": "12356",
        "quantity_on_hand": 122,
        "price": Decimal("12.99"),
    }
    values.update(overrides)
    return BeerEntity(**values)


def make_customer(**overrides) -> CustomerEntity:
    values = {"customer_name": "Customer 1", "email": "customer1@example.com"}
    values.update(overrides)
    return CustomerEntity(**values)


# ============================================================================
# PYTEST FIXTURES
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret_key=TEST_SECRET,
        environment="development",
        log_level="WARNING",
        log_format="text",
        seed_data_enabled=False,
        tracing_enabled=False,
    )


@pytest.fixture
def beer_repo() -> InMemoryRepository:
    repo = InMemoryRepository()
    repo.add(make_beer())
    repo.add(make_beer(beer_name="Crank", upc="12356222", quantity_on_hand=392, price=Decimal("11.99")))
    repo.add(make_beer(beer_name="Sunshine City", beer_style="IPA", quantity_on_hand=144, price=Decimal("13.99")))
    return repo


@pytest.fixture
def customer_repo() -> InMemoryRepository:
    repo = InMemoryRepository()
    repo.add(make_customer())
    repo.add(make_customer(customer_name="Customer 2", email="customer2@example.com"))
    return repo


@pytest.fixture
def app(settings, beer_repo, customer_repo):
    """Application with repositories swapped for in-memory doubles (no lifespan)."""
    application = create_app(settings)
    application.dependency_overrides[get_beer_repository] = lambda: beer_repo
    application.dependency_overrides[get_customer_repository] = lambda: customer_repo
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers(settings) -> Dict[str, str]:
    token = TokenService(settings).create_access_token("test-client", scopes=["brewery.write"])
    return {"Authorization": f"Bearer {token}"}
