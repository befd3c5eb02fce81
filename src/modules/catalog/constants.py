"""Catalog and delivery reference constants."""

from django.db import models


class DeliveryType(models.TextChoices):
    HOME = "HOME", "Home delivery"
    DESK = "DESK", "Pick-up from desk"


SORT_ORDERINGS: dict[str, list[str]] = {
    "createdAt": ["-created_at", "-id"],
    "priceAsc": ["price", "-created_at"],
    "priceDesc": ["-price", "-created_at"],
}

DEFAULT_SORT = "createdAt"
