"""Integration tests for the back-office report endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.catalog.constants import DeliveryType
from modules.orders.constants import FulfillmentStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.integration


@pytest.fixture()
def sales(city, make_product):
    """Mug: 2 orders, 2 units. Lamp: 1 order, 7 units."""
    mug = make_product(name="Mug", stock=50)
    lamp = make_product(name="Lamp", stock=50)

    def _order(*items):
        order = Order.objects.create(
            total=Decimal("100.00"),
            delivery_type=DeliveryType.HOME,
            delivery_city=city,
            address="somewhere",
        )
        for product, qty in items:
            OrderItem.objects.create(
                order=order, product=product, quantity=qty, price=Decimal("5.00")
            )
        return order

    _order((mug, 1), (lamp, 7))
    confirmed = _order((mug, 1))
    confirmed.fulfillment_status = FulfillmentStatus.CONFIRMED
    confirmed.save(update_fields=["fulfillment_status"])
    return mug, lamp


class TestTopProducts:
    def test_top_ordered_counts_orders(self, api_client, sales):
        mug, lamp = sales
        response = api_client.get("/api/admin/top-ordered-products/")

        assert response.status_code == 200
        rows = response.json()
        assert [r["name"] for r in rows] == ["Mug", "Lamp"]
        assert rows[0]["orderCount"] == 2
        assert rows[0]["productId"] == str(mug.id)
        assert "totalQuantity" not in rows[0]

    def test_top_sold_sums_quantity(self, api_client, sales):
        response = api_client.get("/api/admin/top-sold-products/")

        rows = response.json()
        assert [r["name"] for r in rows] == ["Lamp", "Mug"]
        assert rows[0]["totalQuantity"] == 7

    def test_limit_parameter(self, api_client, sales):
        response = api_client.get("/api/admin/top-sold-products/?limit=1")
        assert len(response.json()) == 1


class TestOrdersByStatus:
    def test_grouped_counts(self, api_client, sales):
        response = api_client.get("/api/admin/orders-by-status/")

        assert response.status_code == 200
        assert response.json() == [
            {"fulfillmentStatus": "CONFIRMED", "deliveryStatus": "NOT_READY", "count": 1},
            {"fulfillmentStatus": "NEW", "deliveryStatus": "NOT_READY", "count": 1},
        ]
