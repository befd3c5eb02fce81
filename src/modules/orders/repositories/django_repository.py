"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
``create`` is wrapped in ``transaction.atomic()`` so the Order aggregate
(Order + OrderItems) is persisted atomically even when called outside
the committer; inside the committer it becomes a savepoint.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(
            total=data["total"],
            delivery_type=data["delivery_type"],
            delivery_city_id=data["delivery_city_id"],
            delivery_desk_id=data.get("delivery_desk_id"),
            address=data.get("address", ""),
            client_note=data.get("client_note", ""),
            user_id=data.get("user_id"),
        )
        order.save()

        items = data.get("items", [])
        for item_data in items:
            OrderItem(
                order=order,
                product_id=item_data["product_id"],
                quantity=item_data["quantity"],
                size=item_data.get("size", ""),
                price=item_data["price"],
            ).save()

        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("delivery_city", "delivery_desk")
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def user_exists(self, user_id: int) -> bool:
        return get_user_model().objects.filter(pk=user_id).exists()

    # ------------------------------------------------------------------
    # Reporting aggregates
    # ------------------------------------------------------------------

    def count_by_status(self) -> List[Dict[str, Any]]:
        return list(
            Order.objects.order_by()
            .values("fulfillment_status", "delivery_status")
            .annotate(count=Count("id"))
            .order_by("fulfillment_status", "delivery_status")
        )

    def top_ordered_products(self, limit: int) -> List[Dict[str, Any]]:
        return list(
            OrderItem.objects.order_by()
            .values("product_id", "product__name", "product__reference")
            .annotate(order_count=Count("order", distinct=True))
            .order_by("-order_count", "product__name")[:limit]
        )

    def top_sold_products(self, limit: int) -> List[Dict[str, Any]]:
        return list(
            OrderItem.objects.order_by()
            .values("product_id", "product__name", "product__reference")
            .annotate(total_quantity=Sum("quantity"))
            .order_by("-total_quantity", "product__name")[:limit]
        )
