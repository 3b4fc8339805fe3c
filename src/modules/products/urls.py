"""Catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.products.views import CategoryViewSet, ProductViewSet

STORE_PREFIX = r"stores/(?P<store_id>[^/.]+)"

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(f"{STORE_PREFIX}/categories", CategoryViewSet, basename="category")
router.register(f"{STORE_PREFIX}/products", ProductViewSet, basename="product")

urlpatterns = router.urls
