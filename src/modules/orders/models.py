"""Order and OrderItem models.

Business rules implemented:
- An order is created exactly once, together with its items, by the
  order committer.  After creation only ``fulfillment_status`` and
  ``delivery_status`` may change (enforced in ``Order.save``).
- Order number auto-generated as human-readable identifier.
- Delivery city / desk and products use PROTECT to preserve history.
- OrderItem ``price`` is the unit price the customer was shown at
  checkout, frozen at creation; it never follows later catalog changes.
- OrderItem ``subtotal`` is always ``quantity * price`` (calculated on save).
- OrderItem rows are append-only.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.catalog.constants import DeliveryType
from modules.core.models import BaseModel
from modules.orders.constants import (
    ORDER_NUMBER_MAX_RETRIES,
    STATUS_FIELDS,
    DeliveryStatus,
    FulfillmentStatus,
)

logger = structlog.get_logger(__name__)


class Order(BaseModel):
    """Order aggregate root.

    ``order_number`` is a human-readable identifier auto-generated on first
    save (format: ``ORD-YYYYMMDD-XXXXXX``).  The UUIDv7 ``id`` is what the
    API returns as ``orderId``.

    ``user`` is nullable: guest checkout is the common case.
    """

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    delivery_type = models.CharField(max_length=10, choices=DeliveryType.choices)
    delivery_city = models.ForeignKey(
        "catalog.City",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    delivery_desk = models.ForeignKey(
        "catalog.DeliveryDesk",
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
    )
    address = models.TextField(blank=True, default="")
    client_note = models.TextField(blank=True, default="")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="storefront_orders",
        null=True,
        blank=True,
    )
    fulfillment_status = models.CharField(
        max_length=20,
        choices=FulfillmentStatus.choices,
        default=FulfillmentStatus.NEW,
    )
    delivery_status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.NOT_READY,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["fulfillment_status", "delivery_status"],
                name="orders_status_idx",
            ),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name="orders_total_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        """Generate a human-readable order number: ``ORD-YYYYMMDD-XXXXXX``."""
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is None or not set(update_fields) <= STATUS_FIELDS | {
                "updated_at"
            }:
                raise ValidationError(
                    "Orders are immutable except for their status fields."
                )

        if not self.order_number:
            for _ in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return (
            f"{self.order_number} ({self.fulfillment_status}/{self.delivery_status})"
        )


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``price`` is a **snapshot** of the unit price submitted with the order.
    ``size`` is informational only; stock is tracked per product, not per
    size.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    size = models.CharField(max_length=32, blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="order_items_price_non_negative",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise ValidationError("Order items are append-only.")
        if self.price is None:
            raise ValidationError({"price": "Unit price is required."})
        self.subtotal = self.quantity * self.price
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} @ {self.price}"
