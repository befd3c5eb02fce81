"""Unit tests for CatalogService: sorting, look-ups and delivery pricing."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.catalog.constants import DeliveryType
from modules.catalog.exceptions import (
    CityNotFound,
    DeliveryDeskNotFound,
    DeliverySelectionError,
    ProductNotFound,
)
from modules.catalog.repositories import CatalogDjangoRepository
from modules.catalog.services import CatalogService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CatalogService(repository=CatalogDjangoRepository())


class TestListProducts:
    def test_price_ascending(self, service, make_product):
        mid = make_product(price="20.00")
        cheap = make_product(price="5.00")
        dear = make_product(price="90.00")
        assert list(service.list_products("priceAsc")) == [cheap, mid, dear]

    def test_price_descending(self, service, make_product):
        mid = make_product(price="20.00")
        cheap = make_product(price="5.00")
        dear = make_product(price="90.00")
        assert list(service.list_products("priceDesc")) == [dear, mid, cheap]

    def test_default_is_newest_first(self, service, make_product):
        first = make_product()
        second = make_product()
        assert list(service.list_products()) == [second, first]

    def test_unknown_sort_key_falls_back_to_newest(self, service, make_product):
        first = make_product()
        second = make_product()
        assert list(service.list_products("bogus")) == [second, first]


class TestGetProduct:
    def test_returns_product(self, service, product_a):
        assert service.get_product(str(product_a.id)) == product_a

    def test_missing_product_raises(self, service):
        with pytest.raises(ProductNotFound):
            service.get_product(str(uuid4()))


class TestDeliveryFee:
    def test_home_uses_city_fee(self, service, city):
        assert service.delivery_fee(DeliveryType.HOME, city.id) == Decimal("500.00")

    def test_desk_uses_desk_fee(self, service, city, desk):
        fee = service.delivery_fee(DeliveryType.DESK, city.id, desk.id)
        assert fee == Decimal("250.00")

    def test_unknown_city(self, service):
        with pytest.raises(CityNotFound):
            service.delivery_fee(DeliveryType.HOME, uuid4())

    def test_desk_from_another_city(self, service, city, other_city_desk):
        with pytest.raises(DeliveryDeskNotFound):
            service.delivery_fee(DeliveryType.DESK, city.id, other_city_desk.id)

    def test_desk_missing(self, service, city):
        with pytest.raises(DeliveryDeskNotFound):
            service.delivery_fee(DeliveryType.DESK, city.id, None)

    def test_unknown_delivery_type(self, service, city):
        with pytest.raises(DeliverySelectionError):
            service.delivery_fee("DRONE", city.id)
