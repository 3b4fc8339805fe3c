"""Invitation URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.invitations.views import InvitationViewSet, StoreInvitationViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(
    r"stores/(?P<store_id>[^/.]+)/invitations",
    StoreInvitationViewSet,
    basename="store-invitation",
)
router.register("invitations", InvitationViewSet, basename="invitation")

urlpatterns = router.urls
