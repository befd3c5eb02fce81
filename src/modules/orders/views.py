"""Order API views.

Exposes the ``OrderGateway`` via HTTP using DRF ViewSets.  The gateway
returns a ``PlacementResult`` for every expected outcome; the view only
maps its ``code`` to an HTTP status and the standard error envelope.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_body
from modules.orders.dtos import PlaceOrderDTO, PlacementResult, ValidationLineDTO
from modules.orders.exceptions import OrderNotFound
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderSerializer,
    PlaceOrderSerializer,
    ProductRankingSerializer,
    StatusCountSerializer,
    ValidateOrderSerializer,
)
from modules.orders.services import OrderReportService, build_order_gateway

_VALIDATION_CODES = frozenset(
    {
        "validation_error",
        "missing_required_field",
        "invalid_delivery_selection",
        "total_mismatch",
        "unknown_user",
    }
)

_STATUS_BY_CODE = {
    "insufficient_stock": status.HTTP_409_CONFLICT,
    "product_not_found": status.HTTP_404_NOT_FOUND,
    "commit_failed": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _rejection_response(result: PlacementResult, default_status: int) -> Response:
    if result.code in _VALIDATION_CODES:
        return Response(
            error_body("validation_error", result.message, result.details),
            status=status.HTTP_400_BAD_REQUEST,
        )
    return Response(
        error_body(result.code, result.message, result.details),
        status=_STATUS_BY_CODE.get(result.code, default_status),
    )


class OrderViewSet(GenericViewSet):
    """Checkout endpoints.

    Does **not** extend ``ModelViewSet``: orders are only ever written by
    the committer, through the gateway.
    """

    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._gateway = build_order_gateway()

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "order_creation" if self.action == "create" else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self._gateway.place_order(PlaceOrderDTO(**serializer.validated_data))
        if not result.ok:
            return _rejection_response(result, status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "message": result.message,
                "orderId": str(result.order_id),
                "orderNumber": result.order_number,
            },
            status=status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # Validate (read-only)
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"])
    def validate(self, request: Request) -> Response:
        """POST /api/orders/validate/

        Reports every unavailable line.  Nothing is reserved.
        """
        serializer = ValidateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        lines = [
            ValidationLineDTO(**line)
            for line in serializer.validated_data.get("lines", [])
        ]
        result = self._gateway.validate_order(lines)
        if not result.ok:
            return _rejection_response(result, status.HTTP_409_CONFLICT)
        return Response({"ok": True, "message": result.message})

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/orders/{pk}/"""
        try:
            order = self._gateway.get_order(pk or "")
        except OrderNotFound:
            return Response(
                error_body("not_found", "Order not found."),
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSerializer(order).data)


class OrderReportViewSet(GenericViewSet):
    """Back-office order reports (read-only aggregates)."""

    serializer_class = ProductRankingSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderReportService(order_repository=OrderDjangoRepository())

    def _limit(self, request: Request) -> int:
        raw = request.query_params.get("limit")
        if raw is None:
            return settings.TOP_PRODUCTS_LIMIT
        try:
            return max(1, min(int(raw), 100))
        except ValueError:
            return settings.TOP_PRODUCTS_LIMIT

    @action(detail=False, methods=["get"], url_path="top-ordered-products")
    def top_ordered_products(self, request: Request) -> Response:
        """GET /api/admin/top-ordered-products/"""
        rows = self._service.top_ordered_products(self._limit(request))
        return Response(ProductRankingSerializer(rows, many=True).data)

    @action(detail=False, methods=["get"], url_path="top-sold-products")
    def top_sold_products(self, request: Request) -> Response:
        """GET /api/admin/top-sold-products/"""
        rows = self._service.top_sold_products(self._limit(request))
        return Response(ProductRankingSerializer(rows, many=True).data)

    @action(
        detail=False,
        methods=["get"],
        url_path="orders-by-status",
        serializer_class=StatusCountSerializer,
    )
    def orders_by_status(self, request: Request) -> Response:
        """GET /api/admin/orders-by-status/"""
        rows = self._service.orders_by_status()
        return Response(StatusCountSerializer(rows, many=True).data)
