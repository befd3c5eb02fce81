"""Unit tests for the Inventory Store and the Catalog Reader repository."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.catalog.repositories import CatalogDjangoRepository, InventoryDjangoStore

pytestmark = pytest.mark.unit


@pytest.fixture()
def store():
    return InventoryDjangoStore()


@pytest.fixture()
def repo():
    return CatalogDjangoRepository()


# ===========================================================================
# Conditional decrement
# ===========================================================================


class TestDecrementIfAvailable:
    def test_decrements_when_enough_stock(self, store, product_a):
        assert store.decrement_if_available(product_a.id, 3) is True
        product_a.refresh_from_db()
        assert product_a.stock == 2

    def test_exact_stock_reaches_zero(self, store, product_a):
        assert store.decrement_if_available(product_a.id, 5) is True
        product_a.refresh_from_db()
        assert product_a.stock == 0

    def test_refuses_when_not_enough_stock(self, store, product_a):
        assert store.decrement_if_available(product_a.id, 6) is False
        product_a.refresh_from_db()
        assert product_a.stock == 5

    def test_unknown_product_is_not_decremented(self, store):
        assert store.decrement_if_available(uuid4(), 1) is False

    def test_rejects_non_positive_quantity(self, store, product_a):
        with pytest.raises(ValueError):
            store.decrement_if_available(product_a.id, 0)


class TestAvailable:
    def test_returns_current_stock(self, store, product_a):
        assert store.available(product_a.id) == 5

    def test_returns_none_for_unknown_product(self, store):
        assert store.available(uuid4()) is None


class TestLockForUpdate:
    def test_returns_snapshots_keyed_by_id(self, store, product_a, product_b):
        locked = store.lock_for_update([product_b.id, product_a.id])
        assert set(locked) == {product_a.id, product_b.id}
        assert locked[product_a.id].stock == 5
        assert locked[product_b.id].name == "Product B"

    def test_missing_ids_are_omitted(self, store, product_a):
        locked = store.lock_for_update([product_a.id, uuid4()])
        assert list(locked) == [product_a.id]


# ===========================================================================
# Catalog Reader
# ===========================================================================


class TestCatalogRepository:
    def test_get_snapshots(self, repo, product_a, product_b):
        snapshots = repo.get_snapshots([product_a.id, product_b.id])
        assert snapshots[product_a.id].price == product_a.price
        assert snapshots[product_b.id].stock == 1

    def test_get_by_id_invalid_uuid_returns_none(self, repo):
        assert repo.get_by_id("not-a-uuid") is None

    def test_low_stock_sorted_ascending(self, repo, make_product):
        make_product(name="Plenty", stock=50)
        three = make_product(name="Three", stock=3)
        zero = make_product(name="Zero", stock=0)

        assert repo.low_stock(5) == [zero, three]

    def test_get_city_and_desk(self, repo, city, desk):
        assert repo.get_city(city.id) == city
        assert repo.get_desk(desk.id) == desk
        assert repo.get_desk(uuid4()) is None
