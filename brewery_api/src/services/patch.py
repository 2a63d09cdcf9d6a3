"""
Partial update (PATCH) merge rule shared by the resource services.

A patch body is a pydantic model whose ``model_fields_set`` records which
fields the client actually sent. For every mutable field:

- not sent: the stored value is kept
- sent with a real value (``0`` and ``False`` count as real values): overwritten
- sent as ``null`` or a whitespace-only string: kept, unless ``allow_clear``
  is on and the field is optional, in which case it is set to ``None``

Required fields can never be cleared through a patch.
"""

from typing import Iterable, TypeVar

import structlog
from pydantic import BaseModel

from brewery_api.src.models.common import is_blank

logger = structlog.get_logger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


def patch_updates(
    patch: BaseModel,
    mutable_fields: Iterable[str],
    required_fields: Iterable[str],
    allow_clear: bool = False,
) -> dict:
    """
    Compute the field updates a patch body asks for.

    Args:
        patch: Patch DTO as parsed from the request
        mutable_fields: Entity fields a patch may touch
        required_fields: Fields that must keep a non-blank value
        allow_clear: Whether blank values clear optional fields

    Returns:
        Mapping of field name to new value
    """
    required = set(required_fields)
    updates = {}

    for field in mutable_fields:
        if field not in patch.model_fields_set:
            continue

        value = getattr(patch, field)

        if not is_blank(value):
            updates[field] = value
        elif allow_clear and field not in required:
            updates[field] = None
        else:
            logger.debug("patch_blank_value_ignored", field=field)

    return updates


def apply_patch(
    entity: EntityT,
    patch: BaseModel,
    mutable_fields: Iterable[str],
    required_fields: Iterable[str],
    allow_clear: bool = False,
) -> EntityT:
    """Return a copy of ``entity`` with the patch merged in."""
    updates = patch_updates(patch, mutable_fields, required_fields, allow_clear)
    return entity.model_copy(update=updates)
