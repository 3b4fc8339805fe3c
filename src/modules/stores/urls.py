"""Store URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.stores.views import PublicStoreViewSet, StoreMemberViewSet, StoreViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register("stores", StoreViewSet, basename="store")
router.register("stores", PublicStoreViewSet, basename="public-store")
router.register(
    r"stores/(?P<store_id>[^/.]+)/members", StoreMemberViewSet, basename="store-member"
)

urlpatterns = router.urls
