"""Catalog repositories package."""

from modules.catalog.repositories.django_repository import (
    CatalogDjangoRepository,
    InventoryDjangoStore,
)
from modules.catalog.repositories.interfaces import ICatalogRepository, IInventoryStore

__all__ = [
    "CatalogDjangoRepository",
    "ICatalogRepository",
    "IInventoryStore",
    "InventoryDjangoStore",
]
