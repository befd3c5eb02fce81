"""Catalog repository interfaces.

Two contracts live here:

- ``ICatalogRepository``: the Catalog Reader.  Read-only look-ups of
  products, categories and delivery reference data.  Snapshots it returns
  are used for validation messaging, never as the source of truth at
  commit time.
- ``IInventoryStore``: the only write path to ``Product.stock``.  Its
  methods must be called inside the committer's ``transaction.atomic``
  block.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IReadRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.catalog.dtos import ProductSnapshotDTO
    from modules.catalog.models import Category, City, DeliveryDesk, Product


class ICatalogRepository(IReadRepository["Product"]):
    """Read-only repository contract for the catalog."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products (with category) using optional ORM look-ups."""

    @abstractmethod
    def get_snapshots(self, ids: Iterable[UUID]) -> Dict[UUID, ProductSnapshotDTO]:
        """Return snapshots keyed by id; missing products are absent."""

    @abstractmethod
    def list_categories(self) -> List[Category]:
        """All categories ordered by name."""

    @abstractmethod
    def list_cities(self) -> List[City]:
        """All cities with their delivery desks prefetched."""

    @abstractmethod
    def get_city(self, id: UUID) -> Optional[City]:
        """Retrieve a city by primary key."""

    @abstractmethod
    def get_desk(self, id: UUID) -> Optional[DeliveryDesk]:
        """Retrieve a delivery desk by primary key."""

    @abstractmethod
    def low_stock(self, threshold: int) -> List[Product]:
        """Products whose stock is strictly below ``threshold``, lowest first."""


class IInventoryStore(ABC):
    """Durable product → available quantity mapping."""

    @abstractmethod
    def lock_for_update(self, ids: Iterable[UUID]) -> Dict[UUID, ProductSnapshotDTO]:
        """Row-lock the given products in primary-key order.

        Returns snapshots read *under the lock*, keyed by id.  Products
        that do not exist are absent from the result.
        """

    @abstractmethod
    def decrement_if_available(self, product_id: UUID, quantity: int) -> bool:
        """Atomically subtract ``quantity`` only if stock stays >= 0.

        Returns ``True`` when exactly one row was decremented.
        """

    @abstractmethod
    def available(self, product_id: UUID) -> Optional[int]:
        """Current stock of a product, ``None`` if it does not exist."""
