"""Customer entity/DTO mapping."""

from brewery_api.src.models.customer import CustomerDTO, CustomerEntity


def customer_entity_to_dto(entity: CustomerEntity) -> CustomerDTO:
    return CustomerDTO.model_construct(
        id=entity.id,
        customer_name=entity.customer_name,
        email=entity.email,
        created_date=entity.created_date,
        last_modified_date=entity.last_modified_date,
    )


def customer_dto_to_entity(dto: CustomerDTO) -> CustomerEntity:
    return CustomerEntity(
        id=dto.id,
        customer_name=dto.customer_name,
        email=dto.email,
        created_date=dto.created_date,
        last_modified_date=dto.last_modified_date,
    )
