"""
Customer models.

Mirrors the beer slice: table declaration, immutable entity, full DTO and
partial-update DTO.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from brewery_api.src.models.common import Base, CamelModel, reject_blank


CUSTOMER_MUTABLE_FIELDS = ("customer_name", "email")
CUSTOMER_REQUIRED_FIELDS = frozenset({"customer_name"})


class CustomerRecord(Base):
    """Schema of the ``customer`` table."""
    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
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
        return f"<CustomerRecord(id={self.id}, customer_name='{self.customer_name}')>"


class CustomerEntity(BaseModel):
    """Persistence-facing customer."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    customer_name: str
    email: Optional[str] = None
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None


class CustomerDTO(CamelModel):
    """Customer request/response schema."""
    id: Optional[int] = Field(
        None,
        description="Store-assigned identifier (ignored on input)"
    )
    customer_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Customer name"
    )
    email: Optional[str] = Field(
        None,
        max_length=255,
        description="Contact email"
    )
    created_date: Optional[datetime] = Field(
        None,
        description="Creation timestamp (ignored on input)"
    )
    last_modified_date: Optional[datetime] = Field(
        None,
        description="Last modification timestamp (ignored on input)"
    )

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        return reject_blank(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "customerName": "Joselito",
                "email": "Joselito@google.com"
            }
        }
    }


class CustomerPatchDTO(CamelModel):
    """Partial customer update; omitted fields are left untouched."""
    customer_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
