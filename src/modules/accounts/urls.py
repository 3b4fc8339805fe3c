"""Authentication URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.accounts.views import AuthViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register("auth", AuthViewSet, basename="auth")

urlpatterns = router.urls
