"""
FastAPI dependency injection for settings, database, repositories and services.

Shared resources (settings, connection pool) live on
``app.state`` and are created by ``create_app`` and its lifespan. Tests swap
repositories or services through ``app.dependency_overrides``.
"""

import asyncpg
import structlog
from fastapi import Depends, Request

from brewery_api.src.config import Settings
from brewery_api.src.repositories.beer_repo import BeerRepository
from brewery_api.src.repositories.customer_repo import CustomerRepository
from brewery_api.src.services.beer_service import BeerService
from brewery_api.src.services.customer_service import CustomerService

logger = structlog.get_logger(__name__)


# ============================================================================
# APPLICATION STATE
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_db_pool(request: Request) -> asyncpg.Pool:
    """
    Get database connection pool.

    Args:
        request: HTTP request

    Returns:
        asyncpg connection pool

    Raises:
        RuntimeError: If pool is not initialized
    """
    pool = getattr(request.app.state, "db_pool", None)

    if pool is None:
        logger.error("database_pool_not_initialized")
        raise RuntimeError(
            "Database pool not initialized. It is created by the application lifespan."
        )
    return pool


# ============================================================================
# REPOSITORY DEPENDENCIES
# ============================================================================


def get_beer_repository(
    pool: asyncpg.Pool = Depends(get_db_pool),
    settings: Settings = Depends(get_app_settings)
) -> BeerRepository:
    """
    Get beer repository instance.

    Args:
        pool: Database connection pool
        settings: Application settings

    Returns:
        BeerRepository instance
    """
    return BeerRepository(pool, fetch_size=settings.database_fetch_size)


def get_customer_repository(
    pool: asyncpg.Pool = Depends(get_db_pool),
    settings: Settings = Depends(get_app_settings)
) -> CustomerRepository:
    """
    Get customer repository instance.

    Args:
        pool: Database connection pool
        settings: Application settings

    Returns:
        CustomerRepository instance
    """
    return CustomerRepository(pool, fetch_size=settings.database_fetch_size)


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


def get_beer_service(
    beer_repo: BeerRepository = Depends(get_beer_repository),
    settings: Settings = Depends(get_app_settings)
) -> BeerService:
    return BeerService(beer_repo, patch_allow_clear=settings.patch_allow_clear)


def get_customer_service(
    customer_repo: CustomerRepository = Depends(get_customer_repository),
    settings: Settings = Depends(get_app_settings)
) -> CustomerService:
    return CustomerService(customer_repo, patch_allow_clear=settings.patch_allow_clear)
