"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views) and only
checks payload *shape*.  Presence of the delivery fields is left to the
gateway so the shopper gets the ``Field 'x' is required.`` message.
Field names are camelCase; ``source`` maps them to the DTO names.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class ValidateOrderItemSerializer(serializers.Serializer):
    productId = serializers.UUIDField(source="product_id")
    quantity = serializers.IntegerField(min_value=1)


class OrderLineSerializer(ValidateOrderItemSerializer):
    """A single checkout line: product, quantity, size and shown price."""

    size = serializers.CharField(required=False, default="", allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class PlaceOrderSerializer(serializers.Serializer):
    """Validates the checkout payload sent by the storefront."""

    deliveryType = serializers.CharField(
        source="delivery_type", required=False, allow_blank=True, allow_null=True
    )
    deliveryCityId = serializers.UUIDField(
        source="delivery_city_id", required=False, allow_null=True
    )
    deliveryDeskId = serializers.UUIDField(
        source="delivery_desk_id", required=False, allow_null=True
    )
    address = serializers.CharField(required=False, default="", allow_blank=True)
    clientNote = serializers.CharField(
        source="client_note", required=False, default="", allow_blank=True
    )
    userId = serializers.IntegerField(source="user_id", required=False, allow_null=True)
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    orderItems = OrderLineSerializer(many=True, source="lines", required=False)


class ValidateOrderSerializer(serializers.Serializer):
    """Payload for the read-only availability check."""

    orderItems = ValidateOrderItemSerializer(many=True, source="lines", required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the frozen price."""

    productId = serializers.UUIDField(source="product_id", read_only=True)
    productName = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "productId",
            "productName",
            "quantity",
            "size",
            "price",
            "subtotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for a committed order with nested items."""

    orderNumber = serializers.CharField(source="order_number", read_only=True)
    deliveryType = serializers.CharField(source="delivery_type", read_only=True)
    deliveryCityId = serializers.UUIDField(source="delivery_city_id", read_only=True)
    deliveryCity = serializers.CharField(source="delivery_city.name", read_only=True)
    deliveryDeskId = serializers.UUIDField(source="delivery_desk_id", read_only=True)
    clientNote = serializers.CharField(source="client_note", read_only=True)
    fulfillmentStatus = serializers.CharField(source="fulfillment_status", read_only=True)
    deliveryStatus = serializers.CharField(source="delivery_status", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "orderNumber",
            "total",
            "deliveryType",
            "deliveryCityId",
            "deliveryCity",
            "deliveryDeskId",
            "address",
            "clientNote",
            "fulfillmentStatus",
            "deliveryStatus",
            "createdAt",
            "items",
        ]
        read_only_fields = fields


class StatusCountSerializer(serializers.Serializer):
    fulfillmentStatus = serializers.CharField(source="fulfillment_status")
    deliveryStatus = serializers.CharField(source="delivery_status")
    count = serializers.IntegerField()


class ProductRankingSerializer(serializers.Serializer):
    """Row of the top-ordered / top-sold reports."""

    productId = serializers.UUIDField(source="product_id")
    name = serializers.CharField(source="product__name")
    reference = serializers.CharField(source="product__reference")
    orderCount = serializers.IntegerField(source="order_count", required=False)
    totalQuantity = serializers.IntegerField(source="total_quantity", required=False)
