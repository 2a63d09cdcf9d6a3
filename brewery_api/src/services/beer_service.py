"""
Beer service.

Orchestrates repository calls and entity/DTO mapping. Absence is reported
as ``None`` (or ``False`` for deletes); only store failures raise.
"""

import structlog
from typing import AsyncIterator, Optional

from brewery_api.src.mappers.beer import beer_dto_to_entity, beer_entity_to_dto
from brewery_api.src.models.beer import (
    BEER_MUTABLE_FIELDS,
    BEER_REQUIRED_FIELDS,
    BeerDTO,
    BeerPatchDTO,
)
from brewery_api.src.repositories.beer_repo import BeerRepository
from brewery_api.src.services.patch import apply_patch
from shared.metrics import ApiMetrics, get_api_metrics

logger = structlog.get_logger(__name__)


class BeerService:
    """Service for beer CRUD operations."""

    def __init__(
        self,
        beer_repo: BeerRepository,
        patch_allow_clear: bool = False,
        metrics: Optional[ApiMetrics] = None
    ):
        """
        Initialize beer service.

        Args:
            beer_repo: Beer repository
            patch_allow_clear: Let PATCH clear optional fields with null/blank
            metrics: Metrics sink (process-wide instance by default)
        """
        self.beer_repo = beer_repo
        self.patch_allow_clear = patch_allow_clear
        self.metrics = metrics or get_api_metrics()

    async def list_beers(self) -> AsyncIterator[BeerDTO]:
        """
        Stream every beer in store order.

        Yields:
            Beer DTOs, one per stored row
        """
        beers = self.beer_repo.find_all()
        try:
            async for beer in beers:
                yield beer_entity_to_dto(beer)
        finally:
            await beers.aclose()

        self.metrics.record_operation("beer", "list", "success")

    async def get_beer_by_id(self, beer_id: int) -> Optional[BeerDTO]:
        """
        Get beer by ID.

        Args:
            beer_id: Beer ID

        Returns:
            Beer or None if not found
        """
        beer = await self.beer_repo.find_by_id(beer_id)

        if beer is None:
            logger.info("beer_not_found", beer_id=beer_id, operation="get")
            self.metrics.record_operation("beer", "get", "not_found")
            return None

        self.metrics.record_operation("beer", "get", "success")
        return beer_entity_to_dto(beer)

    async def save_new_beer(self, beer_dto: BeerDTO) -> BeerDTO:
        """
        Persist a new beer.

        Client-supplied ``id`` and timestamps are discarded so the store
        assigns them.

        Args:
            beer_dto: Validated beer

        Returns:
            Stored beer with ID and timestamps populated
        """
        beer = beer_dto_to_entity(beer_dto).model_copy(
            update={"id": None, "created_date": None, "last_modified_date": None}
        )

        saved = await self.beer_repo.save(beer)

        logger.info("beer_created", beer_id=saved.id, beer_name=saved.beer_name)
        self.metrics.record_operation("beer", "create", "success")
        return beer_entity_to_dto(saved)

    async def update_beer(self, beer_id: int, beer_dto: BeerDTO) -> Optional[BeerDTO]:
        """
        Replace every mutable field of an existing beer.

        Args:
            beer_id: Beer ID
            beer_dto: Validated replacement

        Returns:
            Updated beer or None if not found
        """
        existing = await self.beer_repo.find_by_id(beer_id)

        if existing is None:
            logger.info("beer_not_found", beer_id=beer_id, operation="update")
            self.metrics.record_operation("beer", "update", "not_found")
            return None

        replacement = existing.model_copy(
            update={field: getattr(beer_dto, field) for field in BEER_MUTABLE_FIELDS}
        )
        saved = await self.beer_repo.save(replacement)

        # Deleted between the read and the write
        if saved is None:
            self.metrics.record_operation("beer", "update", "not_found")
            return None

        logger.info("beer_updated", beer_id=beer_id)
        self.metrics.record_operation("beer", "update", "success")
        return beer_entity_to_dto(saved)

    async def patch_beer(self, beer_id: int, patch: BeerPatchDTO) -> Optional[BeerDTO]:
        """
        Overwrite only the fields present in the patch body.

        Args:
            beer_id: Beer ID
            patch: Partial update

        Returns:
            Updated beer or None if not found
        """
        existing = await self.beer_repo.find_by_id(beer_id)

        if existing is None:
            logger.info("beer_not_found", beer_id=beer_id, operation="patch")
            self.metrics.record_operation("beer", "patch", "not_found")
            return None

        patched = apply_patch(
            existing,
            patch,
            BEER_MUTABLE_FIELDS,
            BEER_REQUIRED_FIELDS,
            allow_clear=self.patch_allow_clear
        )
        saved = await self.beer_repo.save(patched)

        if saved is None:
            self.metrics.record_operation("beer", "patch", "not_found")
            return None

        logger.info("beer_patched", beer_id=beer_id, fields=sorted(patch.model_fields_set))
        self.metrics.record_operation("beer", "patch", "success")
        return beer_entity_to_dto(saved)

    async def delete_beer_by_id(self, beer_id: int) -> bool:
        """
        Delete beer.

        Args:
            beer_id: Beer ID

        Returns:
            True if deleted, False if not found
        """
        deleted = await self.beer_repo.delete_by_id(beer_id)

        if not deleted:
            logger.info("beer_not_found", beer_id=beer_id, operation="delete")
            self.metrics.record_operation("beer", "delete", "not_found")
            return False

        logger.info("beer_deleted", beer_id=beer_id)
        self.metrics.record_operation("beer", "delete", "success")
        return True
