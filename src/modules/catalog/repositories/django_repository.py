"""Django ORM implementations of the catalog repositories.

Error handling follows the Null Object pattern: look-ups return ``None``
(or omit the key) instead of raising, and the Service Layer decides how
to translate a missing entity.

``InventoryDjangoStore`` combines two guards on every stock mutation:

1. ``SELECT ... FOR UPDATE`` in primary-key order, so concurrent commits
   touching the same products queue behind each other instead of
   deadlocking;
2. a conditional ``UPDATE ... WHERE stock >= quantity``, so the decrement
   itself can never take stock below zero, even on backends that ignore
   ``FOR UPDATE`` (SQLite).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db.models import F, QuerySet
from django.utils import timezone

from modules.catalog.dtos import ProductSnapshotDTO
from modules.catalog.models import Category, City, DeliveryDesk, Product
from modules.catalog.repositories.interfaces import ICatalogRepository, IInventoryStore

logger = structlog.get_logger(__name__)


class CatalogDjangoRepository(ICatalogRepository):
    """Concrete Catalog Reader backed by Django ORM."""

    def get_by_id(self, id: Any) -> Optional[Product]:
        """Retrieve a product (with category) by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.select_related("category").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category__name": "Apparel"}
            {"is_sale": True}
        """
        queryset = Product.objects.select_related("category")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_snapshots(self, ids: Iterable[UUID]) -> Dict[UUID, ProductSnapshotDTO]:
        products = Product.objects.filter(id__in=list(ids)).only(
            "id", "name", "price", "stock"
        )
        return {p.id: ProductSnapshotDTO.from_entity(p) for p in products}

    def list_categories(self) -> List[Category]:
        return list(Category.objects.all())

    def list_cities(self) -> List[City]:
        return list(City.objects.prefetch_related("delivery_desks"))

    def get_city(self, id: UUID) -> Optional[City]:
        try:
            return City.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_desk(self, id: UUID) -> Optional[DeliveryDesk]:
        try:
            return DeliveryDesk.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def low_stock(self, threshold: int) -> List[Product]:
        return list(
            Product.objects.select_related("category")
            .filter(stock__lt=threshold)
            .order_by("stock", "name")
        )


class InventoryDjangoStore(IInventoryStore):
    """Inventory Store over the ``products.stock`` column."""

    def lock_for_update(self, ids: Iterable[UUID]) -> Dict[UUID, ProductSnapshotDTO]:
        ordered = sorted(set(ids))
        rows = (
            Product.objects.select_for_update()
            .filter(id__in=ordered)
            .order_by("id")
            .only("id", "name", "price", "stock")
        )
        locked = {row.id: ProductSnapshotDTO.from_entity(row) for row in rows}
        logger.debug(
            "inventory.rows_locked",
            requested=len(ordered),
            locked=len(locked),
        )
        return locked

    def decrement_if_available(self, product_id: UUID, quantity: int) -> bool:
        if quantity < 1:
            raise ValueError("Quantity to decrement must be at least 1.")
        updated = Product.objects.filter(id=product_id, stock__gte=quantity).update(
            stock=F("stock") - quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    def available(self, product_id: UUID) -> Optional[int]:
        return (
            Product.objects.filter(id=product_id)
            .values_list("stock", flat=True)
            .first()
        )
