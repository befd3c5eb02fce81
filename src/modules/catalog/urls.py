"""Catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.catalog.views import (
    CatalogAdminViewSet,
    CategoryViewSet,
    CityViewSet,
    ProductViewSet,
)

router = DefaultRouter(trailing_slash=True)
router.register("products", ProductViewSet, basename="product")
router.register("categories", CategoryViewSet, basename="category")
router.register("cities", CityViewSet, basename="city")
router.register("admin", CatalogAdminViewSet, basename="catalog-admin")

urlpatterns = router.urls
