"""
Beer models.

- ``BeerRecord``: SQLAlchemy declaration of the ``beer`` table
- ``BeerEntity``: immutable row as read from / written to the store
- ``BeerDTO``: validated request/response body for create, read and full update
- ``BeerPatchDTO``: partial update body; presence is tracked per field
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import DateTime, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from brewery_api.src.models.common import Base, CamelModel, Int32, Money, reject_blank


BEER_MUTABLE_FIELDS = ("beer_name", "beer_style", "upc", "quantity_on_hand", "price")
BEER_REQUIRED_FIELDS = frozenset({"beer_name", "beer_style", "price"})


# ============================================================================
# SQLAlchemy Table
# ============================================================================


class BeerRecord(Base):
    """Schema of the ``beer`` table."""
    __tablename__ = "beer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    beer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    beer_style: Mapped[str] = mapped_column(String(255), nullable=False)
    upc: Mapped[Optional[str]] = mapped_column(String(25), nullable=True)
    quantity_on_hand: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(19, 2), nullable=False)
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP")
    )
    last_modified_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP")
    )

    def __repr__(self) -> str:
        return f"<BeerRecord(id={self.id}, beer_name='{self.beer_name}')>"


# ============================================================================
# Entity
# ============================================================================


class BeerEntity(BaseModel):
    """Persistence-facing beer. ``id`` and timestamps are owned by the store."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    beer_name: str
    beer_style: str
    upc: Optional[str] = None
    quantity_on_hand: Optional[int] = None
    price: Decimal
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None


# ============================================================================
# Transfer Objects
# ============================================================================


class BeerDTO(CamelModel):
    """Beer request/response schema."""
    id: Optional[int] = Field(
        None,
        description="Store-assigned identifier (ignored on input)"
    )
    beer_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Beer name"
    )
    beer_style: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Beer style"
    )
    upc: Optional[str] = Field(
        None,
        max_length=25,
        description="Universal product code"
    )
    quantity_on_hand: Optional[Int32] = Field(
        None,
        description="Units in stock"
    )
    price: Money = Field(
        ...,
        description="Unit price"
    )
    created_date: Optional[datetime] = Field(
        None,
        description="Creation timestamp (ignored on input)"
    )
    last_modified_date: Optional[datetime] = Field(
        None,
        description="Last modification timestamp (ignored on input)"
    )

    @field_validator("beer_name", "beer_style")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only names and styles."""
        return reject_blank(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "beerName": "Space Dust",
                "beerStyle": "IPA",
                "upc": "123213",
                "quantityOnHand": 42,
                "price": 10.99
            }
        }
    }


class BeerPatchDTO(CamelModel):
    """
    Partial beer update.

    Every field is optional. Fields left out of the request body are not in
    ``model_fields_set`` and are never touched by a patch.
    """
    beer_name: Optional[str] = Field(None, max_length=255)
    beer_style: Optional[str] = Field(None, max_length=255)
    upc: Optional[str] = Field(None, max_length=25)
    quantity_on_hand: Optional[Int32] = None
    price: Optional[Money] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "price": 11.49
            }
        }
    }
