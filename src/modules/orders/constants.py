"""Order domain constants.

Order status is tracked on two independent axes: the fulfillment (call
centre) status and the delivery status.  Orders are always created in
``NEW`` / ``NOT_READY``; later transitions belong to back-office tooling.
"""

from decimal import Decimal

from django.db import models


class FulfillmentStatus(models.TextChoices):
    NEW = "NEW", "New"
    CONFIRMED = "CONFIRMED", "Confirmed"
    UNREACHABLE = "UNREACHABLE", "Customer unreachable"
    REJECTED = "REJECTED", "Rejected"


class DeliveryStatus(models.TextChoices):
    NOT_READY = "NOT_READY", "Not ready"
    READY = "READY", "Ready"
    IN_TRANSIT = "IN_TRANSIT", "In transit"
    DELIVERED = "DELIVERED", "Delivered"
    RETURNED = "RETURNED", "Returned"


STATUS_FIELDS: frozenset[str] = frozenset({"fulfillment_status", "delivery_status"})

ORDER_NUMBER_MAX_RETRIES = 5

TOTAL_TOLERANCE = Decimal("0.01")

ORDER_PLACED_MESSAGE = "Order placed successfully!"
ORDER_VALID_MESSAGE = "All items are available."
GENERIC_FAILURE_MESSAGE = "Failed to place order. Please try again."
