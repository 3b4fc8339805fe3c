"""Delivery URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.delivery.views import (
    BlockedDateViewSet,
    DeliverySlotViewSet,
    DeliveryZoneViewSet,
)

STORE_PREFIX = r"stores/(?P<store_id>[^/.]+)"

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(f"{STORE_PREFIX}/delivery-zones", DeliveryZoneViewSet, basename="delivery-zone")
router.register(f"{STORE_PREFIX}/delivery-slots", DeliverySlotViewSet, basename="delivery-slot")
router.register(f"{STORE_PREFIX}/blocked-dates", BlockedDateViewSet, basename="blocked-date")

urlpatterns = router.urls
