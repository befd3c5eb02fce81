from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.catalog.models import Category, City, DeliveryDesk, Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _reset_throttling():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def category():
    return Category.objects.create(name="Apparel")


@pytest.fixture()
def make_product(category):
    """Factory for products; each call gets a unique reference."""
    counter = {"n": 0}

    def _make(name="T-Shirt", price="19.99", stock=10, **extra):
        counter["n"] += 1
        return Product.objects.create(
            name=name,
            reference=extra.pop("reference", f"REF-{counter['n']:03d}"),
            price=Decimal(price),
            stock=stock,
            category=extra.pop("category", category),
            **extra,
        )

    return _make


@pytest.fixture()
def product_a(make_product):
    return make_product(name="Product A", price="10.00", stock=5)


@pytest.fixture()
def product_b(make_product):
    return make_product(name="Product B", price="25.00", stock=1)


@pytest.fixture()
def city():
    return City.objects.create(name="Algiers", home_fee=Decimal("500.00"))


@pytest.fixture()
def desk(city):
    return DeliveryDesk.objects.create(
        name="Algiers Desk 1", desk_fee=Decimal("250.00"), city=city
    )


@pytest.fixture()
def other_city_desk():
    oran = City.objects.create(name="Oran", home_fee=Decimal("600.00"))
    return DeliveryDesk.objects.create(
        name="Oran Desk 1", desk_fee=Decimal("300.00"), city=oran
    )
