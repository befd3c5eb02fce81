"""Catalog DRF serializers (read-only).

Field names are camelCase to match what the storefront client renders.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import Category, City, DeliveryDesk, Product


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Public product representation, including the current stock."""

    oldPrice = serializers.DecimalField(
        source="old_price", max_digits=10, decimal_places=2, read_only=True
    )
    isSale = serializers.BooleanField(source="is_sale", read_only=True)
    category = serializers.CharField(source="category.name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "reference",
            "description",
            "price",
            "oldPrice",
            "isSale",
            "sizes",
            "stock",
            "category",
            "createdAt",
        ]
        read_only_fields = fields


class AdminProductSerializer(serializers.ModelSerializer):
    """Back-office product row: the columns stock managers look at."""

    oldPrice = serializers.DecimalField(
        source="old_price", max_digits=10, decimal_places=2, read_only=True
    )
    isSale = serializers.BooleanField(source="is_sale", read_only=True)
    category = serializers.CharField(source="category.name", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "reference",
            "stock",
            "isSale",
            "price",
            "oldPrice",
            "category",
        ]
        read_only_fields = fields


class DeliveryDeskSerializer(serializers.ModelSerializer):
    deskFee = serializers.DecimalField(
        source="desk_fee", max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = DeliveryDesk
        fields = ["id", "name", "deskFee"]
        read_only_fields = fields


class CitySerializer(serializers.ModelSerializer):
    homeFee = serializers.DecimalField(
        source="home_fee", max_digits=10, decimal_places=2, read_only=True
    )
    deliveryDesks = DeliveryDeskSerializer(
        source="delivery_desks", many=True, read_only=True
    )

    class Meta:
        model = City
        fields = ["id", "name", "homeFee", "deliveryDesks"]
        read_only_fields = fields
