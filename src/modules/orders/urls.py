"""Order URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet, PublicOrderViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(r"stores/(?P<store_id>[^/.]+)/orders", OrderViewSet, basename="order")
router.register("orders", PublicOrderViewSet, basename="public-order")

urlpatterns = router.urls
