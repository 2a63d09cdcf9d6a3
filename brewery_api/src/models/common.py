"""
Shared model building blocks.

Provides:
- The SQLAlchemy declarative base used to describe the relational schema
- A camelCase pydantic base for transfer objects
- The ``Money`` annotated type (Decimal in Python, number in JSON) and the
  ``Int32`` type, both bounded to what their columns can store
- Error response schemas used in OpenAPI docs
"""

from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import DeclarativeBase


# ============================================================================
# SQLAlchemy Base
# ============================================================================


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy table declarations.

    The models are only used to describe and create the schema; row access
    goes through asyncpg in the repositories.
    """
    pass


# ============================================================================
# Pydantic helpers
# ============================================================================


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

# 15 significant digits survive the float conversion exactly and fit NUMERIC(19,2)
MONEY_MAX_DIGITS = 15
MONEY_DECIMAL_PLACES = 2

Money = Annotated[
    Decimal,
    Field(max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class CamelModel(BaseModel):
    """Transfer object base: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def is_blank(value: object) -> bool:
    """True for None and for strings that are empty after stripping."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def reject_blank(value: str) -> str:
    if is_blank(value):
        raise ValueError("must not be blank")
    return value


# ============================================================================
# Error Models
# ============================================================================


class ErrorResponse(BaseModel):
    """Error response schema."""
    detail: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )


class ValidationErrorResponse(BaseModel):
    """Validation error response schema."""
    detail: List[dict] = Field(
        ...,
        min_length=1,
        description="Validation errors"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "detail": [
                    {
                        "loc": ["body", "beerName"],
                        "msg": "String should have at least 1 character",
                        "type": "string_too_short"
                    }
                ]
            }
        }
    }


class TokenPayload(BaseModel):
    """Claims extracted from a validated bearer token."""
    sub: str = Field(..., description="Subject (client or user id)")
    scopes: List[str] = Field(default_factory=list, description="Granted scopes")
    exp: int = Field(..., description="Expiration timestamp (Unix epoch)")
    iat: Optional[int] = Field(None, description="Issued at timestamp (Unix epoch)")
    iss: Optional[str] = Field(None, description="Issuer")
    aud: Optional[str] = Field(None, description="Audience")
