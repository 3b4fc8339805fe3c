"""Delivery configuration API: zones, slots and blocked dates.

Reads are open to every store member; writes need OWNER or ADMIN.
"""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.responses import created_response, success_response
from modules.delivery.dtos import (
    BlockedDateDTO,
    BlockedDateRange,
    DeliverySlotDTO,
    DeliveryZoneDTO,
    UpdateDeliverySlotDTO,
    UpdateDeliveryZoneDTO,
)
from modules.delivery.serializers import (
    BlockedDateInputSerializer,
    BlockedDateRangeSerializer,
    BlockedDateSerializer,
    BulkBlockedDatesInputSerializer,
    DeliverySlotInputSerializer,
    DeliverySlotSerializer,
    DeliveryZoneInputSerializer,
    DeliveryZoneSerializer,
)
from modules.delivery.services import (
    BlockedDateService,
    DeliverySlotService,
    DeliveryZoneService,
)
from modules.stores.constants import ALL_ROLES, MANAGER_ROLES
from modules.stores.permissions import IsStoreMember

UUID_REGEX = "[0-9a-fA-F-]{36}"

READ_ACTIONS = {"list", "retrieve", "by_day"}


class _StoreScopedViewSet(GenericViewSet):
    permission_classes = [IsStoreMember]
    lookup_value_regex = UUID_REGEX

    @property
    def store_roles(self) -> dict:
        return {self.action: ALL_ROLES if self.action in READ_ACTIONS else MANAGER_ROLES}


class DeliveryZoneViewSet(_StoreScopedViewSet):
    lookup_url_kwarg = "zone_id"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DeliveryZoneService()

    def list(self, request: Request, store_id: str) -> Response:
        include_inactive = request.query_params.get("include_inactive") in {"1", "true"}
        zones = self._service.list_zones(store_id, include_inactive=include_inactive)
        return success_response(DeliveryZoneSerializer(zones, many=True).data)

    def retrieve(self, request: Request, store_id: str, zone_id: str) -> Response:
        zone = self._service.get_zone(store_id, zone_id)
        return success_response(DeliveryZoneSerializer(zone).data)

    def create(self, request: Request, store_id: str) -> Response:
        serializer = DeliveryZoneInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        zone = self._service.create_zone(
            store_id, DeliveryZoneDTO(**serializer.validated_data)
        )
        return created_response(DeliveryZoneSerializer(zone).data)

    def partial_update(self, request: Request, store_id: str, zone_id: str) -> Response:
        serializer = DeliveryZoneInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        zone = self._service.update_zone(
            store_id, zone_id, UpdateDeliveryZoneDTO(**serializer.validated_data)
        )
        return success_response(DeliveryZoneSerializer(zone).data)

    def destroy(self, request: Request, store_id: str, zone_id: str) -> Response:
        self._service.delete_zone(store_id, zone_id)
        return success_response(message="Delivery zone deleted")


class DeliverySlotViewSet(_StoreScopedViewSet):
    lookup_url_kwarg = "slot_id"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DeliverySlotService()

    def list(self, request: Request, store_id: str) -> Response:
        include_inactive = request.query_params.get("include_inactive") in {"1", "true"}
        slots = self._service.list_slots(store_id, include_inactive=include_inactive)
        return success_response(DeliverySlotSerializer(slots, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"day/(?P<day_of_week>[0-6])")
    def by_day(self, request: Request, store_id: str, day_of_week: str) -> Response:
        slots = self._service.list_by_day(store_id, int(day_of_week))
        return success_response(DeliverySlotSerializer(slots, many=True).data)

    def retrieve(self, request: Request, store_id: str, slot_id: str) -> Response:
        slot = self._service.get_slot(store_id, slot_id)
        return success_response(DeliverySlotSerializer(slot).data)

    def create(self, request: Request, store_id: str) -> Response:
        serializer = DeliverySlotInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = self._service.create_slot(
            store_id, DeliverySlotDTO(**serializer.validated_data)
        )
        return created_response(DeliverySlotSerializer(slot).data)

    def partial_update(self, request: Request, store_id: str, slot_id: str) -> Response:
        serializer = DeliverySlotInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        slot = self._service.update_slot(
            store_id, slot_id, UpdateDeliverySlotDTO(**serializer.validated_data)
        )
        return success_response(DeliverySlotSerializer(slot).data)

    def destroy(self, request: Request, store_id: str, slot_id: str) -> Response:
        self._service.delete_slot(store_id, slot_id)
        return success_response(message="Delivery slot deleted")


class BlockedDateViewSet(_StoreScopedViewSet):
    lookup_url_kwarg = "blocked_date_id"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = BlockedDateService()

    def list(self, request: Request, store_id: str) -> Response:
        params = BlockedDateRangeSerializer(
            data={
                "date_from": request.query_params.get("from"),
                "date_to": request.query_params.get("to"),
            }
        )
        params.is_valid(raise_exception=True)
        window = BlockedDateRange(**params.validated_data)
        blocked = self._service.list_blocked_dates(store_id, window)
        return success_response(BlockedDateSerializer(blocked, many=True).data)

    def create(self, request: Request, store_id: str) -> Response:
        serializer = BlockedDateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        blocked = self._service.create_blocked_date(
            store_id, BlockedDateDTO(**serializer.validated_data)
        )
        return created_response(BlockedDateSerializer(blocked).data)

    @action(detail=False, methods=["post"])
    def bulk(self, request: Request, store_id: str) -> Response:
        serializer = BulkBlockedDatesInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dtos = [BlockedDateDTO(**item) for item in serializer.validated_data["dates"]]
        created = self._service.create_many(store_id, dtos)
        return created_response(BlockedDateSerializer(created, many=True).data)

    def destroy(self, request: Request, store_id: str, blocked_date_id: str) -> Response:
        self._service.delete_blocked_date(store_id, blocked_date_id)
        return success_response(message="Blocked date removed")
