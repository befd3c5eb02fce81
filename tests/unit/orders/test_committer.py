"""Unit tests for OrderCommitter.

Covers:
- Successful commit: order, items and stock decrement in one transaction.
- Stock re-check under lock (stale validation is not trusted).
- Atomicity: any failure leaves no order and no stock change.
- Storage failures surface as ``CommitFailed``.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.db import OperationalError

from modules.catalog.constants import DeliveryType
from modules.catalog.models import Product
from modules.catalog.repositories import InventoryDjangoStore
from modules.orders.committer import OrderCommitter
from modules.orders.constants import GENERIC_FAILURE_MESSAGE
from modules.orders.dtos import OrderLineDTO, PlaceOrderDTO
from modules.orders.exceptions import CommitFailed, InsufficientStock, ProductNotFound
from modules.orders.models import Order, OrderItem
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class _RacingInventoryStore(InventoryDjangoStore):
    """Simulates another buyer draining ``victim`` between lock and decrement."""

    def __init__(self, victim_id):
        self._victim_id = victim_id

    def decrement_if_available(self, product_id, quantity):
        if product_id == self._victim_id:
            Product.objects.filter(id=product_id).update(stock=0)
        return super().decrement_if_available(product_id, quantity)


@pytest.fixture()
def committer():
    return OrderCommitter(
        order_repository=OrderDjangoRepository(),
        inventory_store=InventoryDjangoStore(),
        lock_timeout_ms=1000,
    )


def _command(city, *lines):
    return PlaceOrderDTO(
        delivery_type=DeliveryType.HOME,
        delivery_city_id=city.id,
        address="1 Place des Martyrs",
        lines=[
            OrderLineDTO(product_id=pid, quantity=qty, price=Decimal(price))
            for pid, qty, price in lines
        ],
    )


# ===========================================================================
# Happy path
# ===========================================================================


class TestCommitSuccess:
    def test_creates_order_and_decrements_stock(self, committer, city, product_a):
        order = committer.commit(
            _command(city, (product_a.id, 3, "10.00")), Decimal("530.00")
        )

        product_a.refresh_from_db()
        assert product_a.stock == 2
        assert order.total == Decimal("530.00")
        item = order.items.get()
        assert item.quantity == 3
        assert item.price == Decimal("10.00")

    def test_stores_submitted_price_not_catalog_price(self, committer, city, product_a):
        order = committer.commit(
            _command(city, (product_a.id, 1, "8.50")), Decimal("508.50")
        )
        assert order.items.get().price == Decimal("8.50")

    def test_duplicate_lines_decrement_combined_quantity(
        self, committer, city, product_a
    ):
        order = committer.commit(
            _command(city, (product_a.id, 2, "10.00"), (product_a.id, 3, "10.00")),
            Decimal("550.00"),
        )
        product_a.refresh_from_db()
        assert product_a.stock == 0
        assert order.items.count() == 2


# ===========================================================================
# Rejections under lock
# ===========================================================================


class TestCommitRejections:
    def test_insufficient_stock_at_commit_time(self, committer, city, product_a):
        Product.objects.filter(id=product_a.id).update(stock=2)

        with pytest.raises(InsufficientStock) as exc_info:
            committer.commit(_command(city, (product_a.id, 3, "10.00")), Decimal("530"))

        assert exc_info.value.available == 2
        assert exc_info.value.requested == 3
        product_a.refresh_from_db()
        assert product_a.stock == 2
        assert Order.objects.count() == 0

    def test_missing_product(self, committer, city):
        with pytest.raises(ProductNotFound):
            committer.commit(_command(city, (uuid4(), 1, "10.00")), Decimal("510"))
        assert Order.objects.count() == 0

    def test_partial_failure_rolls_back_everything(
        self, committer, city, product_a, product_b
    ):
        with pytest.raises(InsufficientStock):
            committer.commit(
                _command(city, (product_a.id, 2, "10.00"), (product_b.id, 5, "25.00")),
                Decimal("645.00"),
            )

        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert product_a.stock == 5
        assert product_b.stock == 1
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_failed_conditional_decrement_rolls_back(
        self, city, product_a, product_b
    ):
        victim = max(product_a.id, product_b.id)
        committer = OrderCommitter(
            order_repository=OrderDjangoRepository(),
            inventory_store=_RacingInventoryStore(victim),
        )

        with pytest.raises(InsufficientStock) as exc_info:
            committer.commit(
                _command(city, (product_a.id, 1, "10.00"), (product_b.id, 1, "25.00")),
                Decimal("535.00"),
            )

        assert exc_info.value.product_id == victim
        assert exc_info.value.available == 0
        assert Order.objects.count() == 0
        survivor = Product.objects.get(id=min(product_a.id, product_b.id))
        assert survivor.stock == (5 if survivor.id == product_a.id else 1)


# ===========================================================================
# Storage failures
# ===========================================================================


class TestCommitFailures:
    def test_database_error_becomes_commit_failed(self, committer, city, product_a):
        with patch.object(
            OrderDjangoRepository,
            "create",
            side_effect=OperationalError("disk I/O error"),
        ):
            with pytest.raises(CommitFailed) as exc_info:
                committer.commit(
                    _command(city, (product_a.id, 1, "10.00")), Decimal("510.00")
                )

        assert exc_info.value.message == GENERIC_FAILURE_MESSAGE
        product_a.refresh_from_db()
        assert product_a.stock == 5
        assert Order.objects.count() == 0
