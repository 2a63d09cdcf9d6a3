"""Entity <-> DTO converters.

Plain functions, one module per resource. They copy fields and nothing
else: no validation, no defaults.
"""

from brewery_api.src.mappers.beer import beer_dto_to_entity, beer_entity_to_dto
from brewery_api.src.mappers.customer import (
    customer_dto_to_entity,
    customer_entity_to_dto,
)

__all__ = [
    "beer_dto_to_entity",
    "beer_entity_to_dto",
    "customer_dto_to_entity",
    "customer_entity_to_dto",
]
