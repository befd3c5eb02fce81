"""Integration tests for the checkout API.

``POST /api/orders/``, ``POST /api/orders/validate/`` and
``GET /api/orders/{id}/`` with the camelCase payload the storefront sends.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.db import OperationalError

from modules.catalog.models import Product
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/orders/"
VALIDATE_URL = "/api/orders/validate/"


@pytest.fixture()
def payload(city, product_a):
    return {
        "deliveryType": "HOME",
        "deliveryCityId": str(city.id),
        "address": "5 Rue Larbi Ben M'hidi",
        "clientNote": "Ring twice",
        "total": "530.00",
        "orderItems": [
            {"productId": str(product_a.id), "quantity": 3, "size": "M", "price": "10.00"}
        ],
    }


# ===========================================================================
# POST /api/orders/
# ===========================================================================


class TestCreateOrder:
    def test_created(self, api_client, payload, product_a):
        response = api_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Order placed successfully!"
        assert data["orderNumber"].startswith("ORD-")
        order = Order.objects.get(id=data["orderId"])
        assert order.client_note == "Ring twice"
        assert order.items.get().size == "M"
        product_a.refresh_from_db()
        assert product_a.stock == 2

    def test_insufficient_stock_returns_409(self, api_client, payload, product_a):
        Product.objects.filter(id=product_a.id).update(stock=2)

        response = api_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 409
        data = response.json()
        assert data["type"] == "insufficient_stock"
        assert data["message"] == (
            'Insufficient stock for product "Product A". Available: 2, Requested: 3.'
        )
        assert data["errors"][0]["available"] == 2
        assert Order.objects.count() == 0

    def test_missing_city_returns_400(self, api_client, payload):
        del payload["deliveryCityId"]

        response = api_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        assert data["message"] == "Field 'deliveryCityId' is required."
        assert data["errors"][0]["field"] == "deliveryCityId"

    def test_unknown_product_returns_404(self, api_client, payload):
        payload["orderItems"][0]["productId"] = str(uuid4())
        response = api_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 404
        assert response.json()["type"] == "product_not_found"

    def test_total_mismatch_returns_400(self, api_client, payload):
        payload["total"] = "30.00"
        response = api_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "total_mismatch"

    def test_zero_quantity_rejected_by_serializer(self, api_client, payload):
        payload["orderItems"][0]["quantity"] = 0
        response = api_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        assert data["errors"][0]["field"] == "orderItems[0].quantity"

    def test_error_on_second_line_keeps_its_index(self, api_client, payload, product_b):
        payload["orderItems"].append(
            {"productId": str(product_b.id), "quantity": 0, "price": "25.00"}
        )
        response = api_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 400
        data = response.json()
        assert [e["field"] for e in data["errors"]] == ["orderItems[1].quantity"]
        assert data["message"].startswith("orderItems[1].quantity: ")

    def test_storage_failure_returns_503_with_generic_message(
        self, api_client, payload, product_a
    ):
        with patch.object(
            OrderDjangoRepository,
            "create",
            side_effect=OperationalError("could not serialize access"),
        ):
            response = api_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 503
        data = response.json()
        assert data["message"] == "Failed to place order. Please try again."
        assert "serialize" not in str(data)
        product_a.refresh_from_db()
        assert product_a.stock == 5


# ===========================================================================
# POST /api/orders/validate/
# ===========================================================================


class TestValidateOrder:
    def test_all_available(self, api_client, product_a):
        response = api_client.post(
            VALIDATE_URL,
            {"orderItems": [{"productId": str(product_a.id), "quantity": 5}]},
            format="json",
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True, "message": "All items are available."}

    def test_lists_every_rejection(self, api_client, product_a, product_b):
        response = api_client.post(
            VALIDATE_URL,
            {
                "orderItems": [
                    {"productId": str(product_a.id), "quantity": 6},
                    {"productId": str(product_b.id), "quantity": 2},
                ]
            },
            format="json",
        )
        assert response.status_code == 409
        assert len(response.json()["errors"]) == 2

    def test_does_not_reserve_stock(self, api_client, product_a):
        for _ in range(2):
            api_client.post(
                VALIDATE_URL,
                {"orderItems": [{"productId": str(product_a.id), "quantity": 5}]},
                format="json",
            )
        product_a.refresh_from_db()
        assert product_a.stock == 5

    def test_empty_items_is_validation_error(self, api_client):
        response = api_client.post(VALIDATE_URL, {"orderItems": []}, format="json")
        assert response.status_code == 400


# ===========================================================================
# GET /api/orders/{id}/
# ===========================================================================


class TestRetrieveOrder:
    def test_read_back(self, api_client, payload, city):
        created = api_client.post(ORDERS_URL, payload, format="json").json()

        response = api_client.get(f"{ORDERS_URL}{created['orderId']}/")

        assert response.status_code == 200
        data = response.json()
        assert data["orderNumber"] == created["orderNumber"]
        assert Decimal(data["total"]) == Decimal("530.00")
        assert data["deliveryCity"] == city.name
        assert data["fulfillmentStatus"] == "NEW"
        assert data["deliveryStatus"] == "NOT_READY"
        assert data["items"][0]["productName"] == "Product A"
        assert Decimal(data["items"][0]["subtotal"]) == Decimal("30.00")

    def test_not_found(self, api_client):
        response = api_client.get(f"{ORDERS_URL}{uuid4()}/")
        assert response.status_code == 404
        assert response.json()["type"] == "not_found"
