"""Catalog DTOs for the Service Layer.

``ProductSnapshotDTO`` is what the Catalog Reader and the Inventory Store
hand to the order use-cases: a point-in-time copy of the columns that
validation messages need, detached from the ORM row.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.catalog.models import Product


class ProductSnapshotDTO(BaseModel):
    """Immutable view of a product's name, price and stock at read time."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    price: Decimal
    stock: int

    @classmethod
    def from_entity(cls, product: Product) -> ProductSnapshotDTO:
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            stock=product.stock,
        )
