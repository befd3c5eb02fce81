"""Catalog domain exceptions.

Raised by ``CatalogService`` for read-side look-ups.  The order gateway
translates ``DeliverySelectionError`` into its own validation error; the
catalog views translate ``ProductNotFound`` into a 404.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist."""


class DeliverySelectionError(Exception):
    """The requested delivery city / desk combination cannot be priced."""


class CityNotFound(DeliverySelectionError):
    """The delivery city does not exist."""


class DeliveryDeskNotFound(DeliverySelectionError):
    """The delivery desk does not exist or belongs to another city."""
