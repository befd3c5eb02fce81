"""Catalog API views (read-only).

Exposes ``CatalogService`` via HTTP using DRF ViewSets.  Nothing here
writes to the database: stock only changes through the order committer.
"""

from __future__ import annotations

from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.exceptions import ProductNotFound
from modules.catalog.filters import ProductFilter
from modules.catalog.models import Product
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.catalog.serializers import (
    AdminProductSerializer,
    CategorySerializer,
    CitySerializer,
    ProductSerializer,
)
from modules.catalog.services import CatalogService
from modules.core.exceptions import error_body
from modules.core.pagination import StandardResultsSetPagination


def _catalog_service() -> CatalogService:
    return CatalogService(repository=CatalogDjangoRepository())


class ProductViewSet(ListModelMixin, GenericViewSet):
    """Storefront product listing and detail.

    ``GET /api/products/?category=Apparel&isSale=true&sortBy=priceAsc``
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend, SearchFilter]
    search_fields = ["name", "reference", "description"]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _catalog_service()

    def get_queryset(self):
        return self._service.list_products(self.request.query_params.get("sortBy"))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/products/{pk}/"""
        try:
            product = self._service.get_product(pk or "")
        except ProductNotFound:
            return Response(
                error_body("not_found", "Product not found."),
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ProductSerializer(product).data)


class CategoryViewSet(GenericViewSet):
    serializer_class = CategorySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _catalog_service()

    def list(self, request: Request) -> Response:
        """GET /api/categories/"""
        categories = self._service.list_categories()
        return Response(CategorySerializer(categories, many=True).data)


class CityViewSet(GenericViewSet):
    serializer_class = CitySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _catalog_service()

    def list(self, request: Request) -> Response:
        """GET /api/cities/ (each city with its delivery desks)"""
        cities = self._service.list_cities()
        return Response(CitySerializer(cities, many=True).data)


class CatalogAdminViewSet(GenericViewSet):
    """Back-office catalog views: full product table and low-stock alerts."""

    serializer_class = AdminProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _catalog_service()

    @action(detail=False, methods=["get"], url_path="products")
    def products(self, request: Request) -> Response:
        """GET /api/admin/products/"""
        queryset = self._service.list_products()
        return Response(AdminProductSerializer(queryset, many=True).data)

    @action(detail=False, methods=["get"], url_path="low-stock-products")
    def low_stock_products(self, request: Request) -> Response:
        """GET /api/admin/low-stock-products/?threshold=N"""
        raw = request.query_params.get("threshold")
        try:
            threshold = int(raw) if raw is not None else settings.LOW_STOCK_THRESHOLD
        except ValueError:
            return Response(
                error_body("validation_error", "threshold must be an integer."),
                status=status.HTTP_400_BAD_REQUEST,
            )
        products = self._service.low_stock_products(threshold)
        return Response(AdminProductSerializer(products, many=True).data)
