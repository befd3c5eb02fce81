"""Order domain exceptions.

Raised by the validator, committer and gateway when an order cannot be
placed.  ``OrderError`` subclasses are *expected outcomes*: the gateway
turns them into a ``PlacementResult`` carrying ``code`` and the message
shown to the shopper.  ``CommitFailed`` is the only infrastructure error
and always carries the generic message.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from modules.orders.constants import GENERIC_FAILURE_MESSAGE


class OrderError(Exception):
    """Base class for every reason an order is not placed."""

    code = "order_error"
    field: Optional[str] = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_detail(self) -> Dict[str, Any]:
        detail: Dict[str, Any] = {"code": self.code, "detail": self.message}
        if self.field:
            detail["field"] = self.field
        return detail


# ---------------------------------------------------------------------------
# Validation errors (client-correctable, raised before any transaction)
# ---------------------------------------------------------------------------


class OrderValidationError(OrderError):
    code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class MissingRequiredField(OrderValidationError):
    """A required request field is absent or empty."""

    code = "missing_required_field"

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' is required.", field=field)


class InvalidDeliverySelection(OrderValidationError):
    """Delivery type, city or desk do not form a valid selection."""

    code = "invalid_delivery_selection"


class TotalMismatch(OrderValidationError):
    """The client-computed total disagrees with the server-side total."""

    code = "total_mismatch"

    def __init__(self, submitted: Decimal, computed: Decimal) -> None:
        super().__init__(
            f"Order total {submitted} does not match the expected total {computed}.",
            field="total",
        )
        self.submitted = submitted
        self.computed = computed


class UnknownUser(OrderValidationError):
    """``userId`` was supplied but no such user exists."""

    code = "unknown_user"

    def __init__(self, user_id: Any) -> None:
        super().__init__(f"User {user_id} does not exist.", field="userId")


# ---------------------------------------------------------------------------
# Stock conflicts (state-dependent)
# ---------------------------------------------------------------------------


class ProductNotFound(OrderError):
    """A product referenced by an order line does not exist."""

    code = "product_not_found"

    def __init__(self, product_id: UUID) -> None:
        super().__init__(f"Product with ID {product_id} not found.")
        self.product_id = product_id

    def as_detail(self) -> Dict[str, Any]:
        return {**super().as_detail(), "productId": str(self.product_id)}


class InsufficientStock(OrderError):
    """Available stock is lower than the requested quantity."""

    code = "insufficient_stock"

    def __init__(
        self,
        product_id: UUID,
        product_name: str,
        available: int,
        requested: int,
    ) -> None:
        super().__init__(
            f'Insufficient stock for product "{product_name}". '
            f"Available: {available}, Requested: {requested}."
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested

    def as_detail(self) -> Dict[str, Any]:
        return {
            **super().as_detail(),
            "productId": str(self.product_id),
            "available": self.available,
            "requested": self.requested,
        }


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------


class CommitFailed(OrderError):
    """The storage layer failed; nothing was committed."""

    code = "commit_failed"

    def __init__(self) -> None:
        super().__init__(GENERIC_FAILURE_MESSAGE)


class OrderNotFound(Exception):
    """The requested order does not exist."""
