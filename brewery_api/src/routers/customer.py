"""
Customer router.

Provides REST API endpoints for:
- Creating customers (POST, 201 + Location)
- Reading one customer or streaming all customers (GET)
- Full and partial updates (PUT, PATCH)
- Deleting customers (DELETE)

Write endpoints require a bearer token; reads are public unless the
application is configured to protect them.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from brewery_api.src.dependencies import get_customer_service
from brewery_api.src.middleware.auth import get_principal_from_request
from brewery_api.src.models.customer import CustomerDTO, CustomerPatchDTO
from brewery_api.src.models.common import ErrorResponse, ValidationErrorResponse
from brewery_api.src.routers.streaming import stream_json_array
from brewery_api.src.services.customer_service import CustomerService

router = APIRouter(
    prefix="/customer",
    tags=["Customer"],
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation Error"},
    }
)

WRITE_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Unauthorized"},
}

NOT_FOUND_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Customer not found"},
}


def _customer_not_found(customer_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Customer {customer_id} not found"
    )


# ============================================================================
# READ ENDPOINTS
# ============================================================================


@router.get(
    "",
    response_model=list[CustomerDTO],
    summary="List Customers",
    description="Stream every customer as a JSON array, ordered by id."
)
async def list_customers(
    customer_service: CustomerService = Depends(get_customer_service)
):
    return await stream_json_array(customer_service.list_customers())


@router.get(
    "/{customer_id}",
    response_model=CustomerDTO,
    response_model_by_alias=True,
    summary="Get Customer",
    responses=NOT_FOUND_RESPONSES
)
async def get_customer_by_id(
    customer_id: int,
    customer_service: CustomerService = Depends(get_customer_service)
) -> JSONResponse:
    """
    Get customer by ID.

    Args:
        customer_id: Customer ID
        customer_service: Customer service

    Returns:
        Customer

    Raises:
        HTTPException: 404 if the customer does not exist
    """
    customer = await customer_service.get_customer_by_id(customer_id)

    if customer is None:
        raise _customer_not_found(customer_id)

    return JSONResponse(content=jsonable_encoder(customer))


# ============================================================================
# WRITE ENDPOINTS
# ============================================================================


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Customer",
    description="""
    Create a new customer.

    Any `id`, `createdDate` or `lastModifiedDate` in the body is ignored.

    **Success Response (201):** empty body, `Location` header points at the
    new customer.
    """,
    responses=WRITE_RESPONSES,
    dependencies=[Depends(get_principal_from_request)]
)
async def create_customer(
    request: Request,
    customer: CustomerDTO,
    customer_service: CustomerService = Depends(get_customer_service)
) -> Response:
    saved = await customer_service.save_new_customer(customer)

    location = request.url_for("get_customer_by_id", customer_id=saved.id).path

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": location}
    )


@router.put(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace Customer",
    responses={**WRITE_RESPONSES, **NOT_FOUND_RESPONSES},
    dependencies=[Depends(get_principal_from_request)]
)
async def update_customer(
    customer_id: int,
    customer: CustomerDTO,
    customer_service: CustomerService = Depends(get_customer_service)
) -> Response:
    """
    Replace every mutable field of a customer.

    Args:
        customer_id: Customer ID
        customer: Validated replacement
        customer_service: Customer service

    Raises:
        HTTPException: 404 if the customer does not exist
    """
    updated = await customer_service.update_customer(customer_id, customer)

    if updated is None:
        raise _customer_not_found(customer_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Patch Customer",
    description="Overwrite only the fields present in the body. Blank values are ignored.",
    responses={**WRITE_RESPONSES, **NOT_FOUND_RESPONSES},
    dependencies=[Depends(get_principal_from_request)]
)
async def patch_customer(
    customer_id: int,
    patch: CustomerPatchDTO,
    customer_service: CustomerService = Depends(get_customer_service)
) -> Response:
    patched = await customer_service.patch_customer(customer_id, patch)

    if patched is None:
        raise _customer_not_found(customer_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Customer",
    responses={**WRITE_RESPONSES, **NOT_FOUND_RESPONSES},
    dependencies=[Depends(get_principal_from_request)]
)
async def delete_customer_by_id(
    customer_id: int,
    customer_service: CustomerService = Depends(get_customer_service)
) -> Response:
    deleted = await customer_service.delete_customer_by_id(customer_id)

    if not deleted:
        raise _customer_not_found(customer_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
