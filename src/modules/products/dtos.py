"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``PageQueryDTO``: ``page`` / ``limit`` query parameters.
- ``ProductOutputDTO``: output with all product fields.
- ``ProductPageDTO``: result of listing products.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from modules.products.models import Product

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 3

# Mirrors the ``Product`` column definitions.
NAME_MAX_LENGTH = 255
PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is a non-blank string (stored stripped).
    - ``price`` is a Decimal greater than zero that fits ``decimal(10, 2)``.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=NAME_MAX_LENGTH)
    price: Decimal = Field(
        max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES
    )
    description: str = ""

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    price: Optional[Decimal] = Field(
        default=None,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)


class PageQueryDTO(BaseModel):
    """Parsed ``page`` / ``limit`` query parameters.

    Both must be non-negative integers.  ``0`` is accepted on purpose:
    it asks for the whole collection without pagination.
    """

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=DEFAULT_PAGE, ge=0)
    limit: int = Field(default=DEFAULT_LIMIT, ge=0)

    @classmethod
    def from_query(cls, params: Any) -> PageQueryDTO:
        """Build from a query dict, ignoring absent or empty values."""
        supplied = {
            key: params.get(key)
            for key in ("page", "limit")
            if params.get(key) not in (None, "")
        }
        return cls(**supplied)


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    description: str
    price: Decimal
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductPageDTO(BaseModel):
    """One listing of products.

    ``paginated`` is ``False`` when the caller bypassed pagination; in
    that case ``total`` and ``next_link`` carry no meaning and are left
    out of the payload.
    """

    model_config = ConfigDict(frozen=True)

    data: List[ProductOutputDTO]
    paginated: bool = False
    total: Optional[int] = None
    next_link: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "data": [item.model_dump(mode="json") for item in self.data]
        }
        if self.paginated:
            payload["total"] = self.total
            payload["nextLink"] = self.next_link
        return payload
