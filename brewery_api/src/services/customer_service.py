"""
Customer service.

Same contract as the beer service: ``None``/``False`` for a missing customer,
exceptions only for store failures.
"""

import structlog
from typing import AsyncIterator, Optional

from brewery_api.src.mappers.customer import customer_dto_to_entity, customer_entity_to_dto
from brewery_api.src.models.customer import (
    CUSTOMER_MUTABLE_FIELDS,
    CUSTOMER_REQUIRED_FIELDS,
    CustomerDTO,
    CustomerPatchDTO,
)
from brewery_api.src.repositories.customer_repo import CustomerRepository
from brewery_api.src.services.patch import apply_patch
from shared.metrics import ApiMetrics, get_api_metrics

logger = structlog.get_logger(__name__)


class CustomerService:
    """Service for customer CRUD operations."""

    def __init__(
        self,
        customer_repo: CustomerRepository,
        patch_allow_clear: bool = False,
        metrics: Optional[ApiMetrics] = None
    ):
        self.customer_repo = customer_repo
        self.patch_allow_clear = patch_allow_clear
        self.metrics = metrics or get_api_metrics()

    async def list_customers(self) -> AsyncIterator[CustomerDTO]:
        """Stream every customer in store order."""
        customers = self.customer_repo.find_all()
        try:
            async for customer in customers:
                yield customer_entity_to_dto(customer)
        finally:
            await customers.aclose()

        self.metrics.record_operation("customer", "list", "success")

    async def get_customer_by_id(self, customer_id: int) -> Optional[CustomerDTO]:
        customer = await self.customer_repo.find_by_id(customer_id)

        if customer is None:
            logger.info("customer_not_found", customer_id=customer_id, operation="get")
            self.metrics.record_operation("customer", "get", "not_found")
            return None

        self.metrics.record_operation("customer", "get", "success")
        return customer_entity_to_dto(customer)

    async def save_new_customer(self, customer_dto: CustomerDTO) -> CustomerDTO:
        """
        Persist a new customer, ignoring any client-supplied ID or timestamps.

        Args:
            customer_dto: Validated customer

        Returns:
            Stored customer with ID and timestamps populated
        """
        customer = customer_dto_to_entity(customer_dto).model_copy(
            update={"id": None, "created_date": None, "last_modified_date": None}
        )

        saved = await self.customer_repo.save(customer)

        logger.info("customer_created", customer_id=saved.id)
        self.metrics.record_operation("customer", "create", "success")
        return customer_entity_to_dto(saved)

    async def update_customer(
        self,
        customer_id: int,
        customer_dto: CustomerDTO
    ) -> Optional[CustomerDTO]:
        """
        Full replace of an existing customer. No upsert.

        Returns:
            Updated customer or None if not found
        """
        existing = await self.customer_repo.find_by_id(customer_id)

        if existing is None:
            logger.info("customer_not_found", customer_id=customer_id, operation="update")
            self.metrics.record_operation("customer", "update", "not_found")
            return None

        replacement = existing.model_copy(
            update={field: getattr(customer_dto, field) for field in CUSTOMER_MUTABLE_FIELDS}
        )
        saved = await self.customer_repo.save(replacement)

        if saved is None:
            self.metrics.record_operation("customer", "update", "not_found")
            return None

        logger.info("customer_updated", customer_id=customer_id)
        self.metrics.record_operation("customer", "update", "success")
        return customer_entity_to_dto(saved)

    async def patch_customer(
        self,
        customer_id: int,
        patch: CustomerPatchDTO
    ) -> Optional[CustomerDTO]:
        """
        Overwrite only the fields present in the patch body.

        Returns:
            Updated customer or None if not found
        """
        existing = await self.customer_repo.find_by_id(customer_id)

        if existing is None:
            logger.info("customer_not_found", customer_id=customer_id, operation="patch")
            self.metrics.record_operation("customer", "patch", "not_found")
            return None

        patched = apply_patch(
            existing,
            patch,
            CUSTOMER_MUTABLE_FIELDS,
            CUSTOMER_REQUIRED_FIELDS,
            allow_clear=self.patch_allow_clear
        )
        saved = await self.customer_repo.save(patched)

        if saved is None:
            self.metrics.record_operation("customer", "patch", "not_found")
            return None

        logger.info(
            "customer_patched",
            customer_id=customer_id,
            fields=sorted(patch.model_fields_set)
        )
        self.metrics.record_operation("customer", "patch", "success")
        return customer_entity_to_dto(saved)

    async def delete_customer_by_id(self, customer_id: int) -> bool:
        deleted = await self.customer_repo.delete_by_id(customer_id)

        if not deleted:
            logger.info("customer_not_found", customer_id=customer_id, operation="delete")
            self.metrics.record_operation("customer", "delete", "not_found")
            return False

        logger.info("customer_deleted", customer_id=customer_id)
        self.metrics.record_operation("customer", "delete", "success")
        return True
