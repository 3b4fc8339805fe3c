"""Metrics URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.metrics.views import MetricsViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(r"stores/(?P<store_id>[^/.]+)/metrics", MetricsViewSet, basename="metrics")

urlpatterns = router.urls
