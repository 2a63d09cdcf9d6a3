"""
Beer router.

Provides REST API endpoints for:
- Creating beers (POST, 201 + Location)
- Reading one beer or streaming all beers (GET)
- Full and partial updates (PUT, PATCH)
- Deleting beers (DELETE)

Write endpoints require a bearer token; reads are public unless the
application is configured to protect them.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from brewery_api.src.dependencies import get_beer_service
from brewery_api.src.middleware.auth import get_principal_from_request
from brewery_api.src.models.beer import BeerDTO, BeerPatchDTO
from brewery_api.src.models.common import ErrorResponse, ValidationErrorResponse
from brewery_api.src.routers.streaming import stream_json_array
from brewery_api.src.services.beer_service import BeerService

router = APIRouter(
    prefix="/beer",
    tags=["Beer"],
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation Error"},
    }
)

WRITE_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Unauthorized"},
}

NOT_FOUND_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Beer not found"},
}


def _beer_not_found(beer_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Beer {beer_id} not found"
    )


# ============================================================================
# READ ENDPOINTS
# ============================================================================


@router.get(
    "",
    response_model=list[BeerDTO],
    summary="List Beers",
    description="Stream every beer as a JSON array, ordered by id."
)
async def list_beers(
    beer_service: BeerService = Depends(get_beer_service)
):
    return await stream_json_array(beer_service.list_beers())


@router.get(
    "/{beer_id}",
    response_model=BeerDTO,
    response_model_by_alias=True,
    summary="Get Beer",
    responses=NOT_FOUND_RESPONSES
)
async def get_beer_by_id(
    beer_id: int,
    beer_service: BeerService = Depends(get_beer_service)
) -> JSONResponse:
    """
    Get beer by ID.

    Args:
        beer_id: Beer ID
        beer_service: Beer service

    Returns:
        Beer

    Raises:
        HTTPException: 404 if the beer does not exist
    """
    beer = await beer_service.get_beer_by_id(beer_id)

    if beer is None:
        raise _beer_not_found(beer_id)

    # Stored rows are sent as read, without response model validation
    return JSONResponse(content=jsonable_encoder(beer))


# ============================================================================
# WRITE ENDPOINTS
# ============================================================================


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Beer",
    description="""
    Create a new beer.

    Any `id`, `createdDate` or `lastModifiedDate` in the body is ignored.

    **Success Response (201):** empty body, `Location` header points at the
    new beer.
    """,
    responses=WRITE_RESPONSES,
    dependencies=[Depends(get_principal_from_request)]
)
async def create_beer(
    request: Request,
    beer: BeerDTO,
    beer_service: BeerService = Depends(get_beer_service)
) -> Response:
    saved = await beer_service.save_new_beer(beer)

    location = request.url_for("get_beer_by_id", beer_id=saved.id).path

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": location}
    )


@router.put(
    "/{beer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace Beer",
    responses={**WRITE_RESPONSES, **NOT_FOUND_RESPONSES},
    dependencies=[Depends(get_principal_from_request)]
)
async def update_beer(
    beer_id: int,
    beer: BeerDTO,
    beer_service: BeerService = Depends(get_beer_service)
) -> Response:
    """
    Replace every mutable field of a beer.

    Args:
        beer_id: Beer ID
        beer: Validated replacement
        beer_service: Beer service

    Raises:
        HTTPException: 404 if the beer does not exist
    """
    updated = await beer_service.update_beer(beer_id, beer)

    if updated is None:
        raise _beer_not_found(beer_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{beer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Patch Beer",
    description="Overwrite only the fields present in the body. Blank values are ignored.",
    responses={**WRITE_RESPONSES, **NOT_FOUND_RESPONSES},
    dependencies=[Depends(get_principal_from_request)]
)
async def patch_beer(
    beer_id: int,
    patch: BeerPatchDTO,
    beer_service: BeerService = Depends(get_beer_service)
) -> Response:
    patched = await beer_service.patch_beer(beer_id, patch)

    if patched is None:
        raise _beer_not_found(beer_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{beer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Beer",
    responses={**WRITE_RESPONSES, **NOT_FOUND_RESPONSES},
    dependencies=[Depends(get_principal_from_request)]
)
async def delete_beer_by_id(
    beer_id: int,
    beer_service: BeerService = Depends(get_beer_service)
) -> Response:
    deleted = await beer_service.delete_beer_by_id(beer_id)

    if not deleted:
        raise _beer_not_found(beer_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
