"""Metrics API views (OWNER and ADMIN only)."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.responses import success_response
from modules.metrics.serializers import MetricsQuerySerializer, StoreMetricsSerializer
from modules.metrics.services import MetricsService, MetricsWindow
from modules.stores.constants import MANAGER_ROLES
from modules.stores.permissions import IsStoreMember


class MetricsViewSet(ViewSet):
    permission_classes = [IsStoreMember]
    store_roles = {"default": MANAGER_ROLES}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = MetricsService()

    def list(self, request: Request, store_id: str) -> Response:
        """GET /api/v1/stores/{id}/metrics/?from=YYYY-MM-DD&to=YYYY-MM-DD"""
        query = MetricsQuerySerializer(
            data={
                "date_from": request.query_params.get("from") or None,
                "date_to": request.query_params.get("to") or None,
            }
        )
        query.is_valid(raise_exception=True)
        window = MetricsWindow.for_dates(
            query.validated_data.get("date_from"), query.validated_data.get("date_to")
        )
        metrics = self._service.get_store_metrics(store_id, window)
        return success_response(StoreMetricsSerializer(metrics).data)

    @action(detail=False, methods=["get"])
    def today(self, request: Request, store_id: str) -> Response:
        metrics = self._service.get_today_metrics(store_id)
        return success_response(StoreMetricsSerializer(metrics).data)
