"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``ValidationLineDTO``: one ``(product_id, quantity)`` pair to check.
- ``OrderLineDTO``: a line to commit, with size and the price shown.
- ``PlaceOrderDTO``: the full order request.  Delivery fields are
  optional here on purpose: the gateway reports which one is missing.
- ``PlacementResult``: what the gateway hands back to the caller.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import (
    GENERIC_FAILURE_MESSAGE,
    ORDER_PLACED_MESSAGE,
    ORDER_VALID_MESSAGE,
)

if TYPE_CHECKING:
    from modules.orders.exceptions import OrderError
    from modules.orders.models import Order


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class ValidationLineDTO(BaseModel):
    """Immutable ``(product_id, quantity)`` pair for availability checks."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class OrderLineDTO(ValidationLineDTO):
    """A line item as submitted at checkout.

    ``price`` is the unit price the customer saw; it is stored as-is.
    """

    size: str = ""
    price: Decimal

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for an order placement request."""

    model_config = ConfigDict(frozen=True)

    delivery_type: Optional[str] = None
    delivery_city_id: Optional[UUID] = None
    delivery_desk_id: Optional[UUID] = None
    address: str = ""
    client_note: str = ""
    user_id: Optional[int] = None
    total: Optional[Decimal] = None
    lines: List[OrderLineDTO] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class PlacementResult(BaseModel):
    """Outcome of a gateway call, safe to show to the shopper.

    ``details`` lists every rejection (one entry per failing line for
    ``validate_order``; a single entry for ``place_order``).
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    code: str
    message: str
    order_id: Optional[UUID] = None
    order_number: Optional[str] = None
    field: Optional[str] = None
    details: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def placed(cls, order: Order) -> PlacementResult:
        return cls(
            ok=True,
            code="order_placed",
            message=ORDER_PLACED_MESSAGE,
            order_id=order.id,
            order_number=order.order_number,
        )

    @classmethod
    def available(cls) -> PlacementResult:
        return cls(ok=True, code="ok", message=ORDER_VALID_MESSAGE)

    @classmethod
    def rejected(cls, *errors: OrderError) -> PlacementResult:
        first = errors[0]
        return cls(
            ok=False,
            code=first.code,
            message=first.message,
            field=first.field,
            details=[error.as_detail() for error in errors],
        )

    @classmethod
    def failed(cls) -> PlacementResult:
        return cls(
            ok=False,
            code="commit_failed",
            message=GENERIC_FAILURE_MESSAGE,
            details=[{"code": "commit_failed", "detail": GENERIC_FAILURE_MESSAGE}],
        )
