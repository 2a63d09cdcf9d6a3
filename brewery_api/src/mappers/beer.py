"""Beer entity/DTO mapping."""

from brewery_api.src.models.beer import BeerDTO, BeerEntity


def beer_entity_to_dto(entity: BeerEntity) -> BeerDTO:
    """Copy a stored row as is. Rows are not re-validated on the way out."""
    return BeerDTO.model_construct(
        id=entity.id,
        beer_name=entity.beer_name,
        beer_style=entity.beer_style,
        upc=entity.upc,
        quantity_on_hand=entity.quantity_on_hand,
        price=entity.price,
        created_date=entity.created_date,
        last_modified_date=entity.last_modified_date,
    )


def beer_dto_to_entity(dto: BeerDTO) -> BeerEntity:
    """An unset ``dto.id`` stays unset so the store assigns one."""
    return BeerEntity(
        id=dto.id,
        beer_name=dto.beer_name,
        beer_style=dto.beer_style,
        upc=dto.upc,
        quantity_on_hand=dto.quantity_on_hand,
        price=dto.price,
        created_date=dto.created_date,
        last_modified_date=dto.last_modified_date,
    )
