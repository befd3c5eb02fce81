"""Catalog service layer (read-side use cases).

Everything here is read-only: listing and filtering the catalog,
single-product look-ups, delivery reference data and the delivery fee
used to price an order.  Stock is never written from this module.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog

from modules.catalog.constants import DEFAULT_SORT, SORT_ORDERINGS, DeliveryType
from modules.catalog.exceptions import (
    CityNotFound,
    DeliveryDeskNotFound,
    DeliverySelectionError,
    ProductNotFound,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.catalog.models import Category, City, Product
    from modules.catalog.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)


class CatalogService:
    """Application service for catalog queries.

    Receives an ``ICatalogRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICatalogRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self, sort_by: Optional[str] = None) -> QuerySet[Product]:
        """Return the product queryset ordered by a storefront sort key.

        Unknown sort keys fall back to newest first.
        """
        ordering = SORT_ORDERINGS.get(sort_by or DEFAULT_SORT, SORT_ORDERINGS[DEFAULT_SORT])
        return self._repo.list().order_by(*ordering)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def low_stock_products(self, threshold: int) -> List[Product]:
        return self._repo.low_stock(threshold)

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    def list_categories(self) -> List[Category]:
        return self._repo.list_categories()

    def list_cities(self) -> List[City]:
        return self._repo.list_cities()

    def delivery_fee(
        self,
        delivery_type: str,
        city_id: UUID,
        desk_id: Optional[UUID] = None,
    ) -> Decimal:
        """Fee charged for delivering to ``city_id`` (home) or ``desk_id``.

        Raises:
            CityNotFound: the city does not exist.
            DeliveryDeskNotFound: the desk does not exist or is in another city.
            DeliverySelectionError: unknown delivery type.
        """
        city = self._repo.get_city(city_id)
        if not city:
            raise CityNotFound(f"City {city_id} not found.")

        if delivery_type == DeliveryType.HOME:
            return city.home_fee

        if delivery_type == DeliveryType.DESK:
            desk = self._repo.get_desk(desk_id) if desk_id else None
            if not desk or desk.city_id != city.id:
                raise DeliveryDeskNotFound(
                    f"Delivery desk {desk_id} not found in city {city.name}."
                )
            return desk.desk_fee

        raise DeliverySelectionError(f"Unknown delivery type {delivery_type!r}.")
