"""Catalog and delivery reference models.

Business rules implemented:
- Product ``reference`` is unique and normalised to uppercase.
- Price must be greater than zero.
- Stock can never be negative: enforced by ``PositiveIntegerField`` and a
  database CHECK constraint, so even a buggy write path fails loudly.
- ``stock`` is mutated only by the order committer, through
  ``InventoryDjangoStore``.  Everything else in this app is read-only.
- City / DeliveryDesk carry the delivery fees used to price an order.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Category(BaseModel):
    name = models.CharField(max_length=120, unique=True)

    class Meta:
        db_table = "categories"
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Product(BaseModel):
    """Sellable product and its available stock.

    ``price`` is the current catalog price.  Orders never read it back
    once placed: each ``OrderItem`` keeps the price the customer was shown.
    """

    name = models.CharField(max_length=255)
    reference = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    old_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )
    is_sale = models.BooleanField(default=False)
    sizes = models.JSONField(default=list, blank=True)
    stock = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="products",
    )

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_sale"], name="products_is_sale_idx"),
            models.Index(fields=["stock"], name="products_stock_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.reference:
            self.reference = self.reference.strip().upper()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.reference:
            self.reference = self.reference.strip().upper()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                reference=self.reference,
                stock=self.stock,
            )

    def __str__(self) -> str:
        return f"{self.reference} - {self.name}"


class City(BaseModel):
    """Delivery region (wilaya) with its home-delivery fee."""

    name = models.CharField(max_length=120, unique=True)
    home_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    class Meta:
        db_table = "cities"
        ordering = ["name"]
        verbose_name_plural = "cities"

    def __str__(self) -> str:
        return self.name


class DeliveryDesk(BaseModel):
    """Pick-up point inside a city, with its own (usually lower) fee."""

    name = models.CharField(max_length=160)
    desk_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    city = models.ForeignKey(
        City,
        on_delete=models.CASCADE,
        related_name="delivery_desks",
    )

    class Meta:
        db_table = "delivery_desks"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.city_id})"
