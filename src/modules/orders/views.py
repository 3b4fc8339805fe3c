"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Domain
exceptions propagate to the envelope exception handler; the views never
translate them by hand.
"""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.responses import created_response, success_response
from modules.orders.dtos import CreateOrderDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AssignDeliverySerializer,
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderCreatedSerializer,
    OrderSerializer,
    OrderTrackingSerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.stores.constants import ALL_ROLES, MANAGER_ROLES
from modules.stores.permissions import IsStoreMember


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


class OrderViewSet(GenericViewSet):
    """Store-side order management plus public placement.

    ``create`` is public and receives the store **slug** in the URL;
    every other action receives the store id and requires membership.
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    permission_classes = [IsStoreMember]
    lookup_url_kwarg = "order_id"
    lookup_value_regex = "[0-9a-fA-F-]{36}"
    queryset = Order.objects.none()
    store_roles = {
        "default": ALL_ROLES,
        "assign": MANAGER_ROLES,
        "confirm_payment": MANAGER_ROLES,
        "cancel": MANAGER_ROLES,
    }

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        return super().get_permissions()

    def get_throttles(self) -> list[BaseThrottle]:
        """Only public placement is rate limited."""
        self.throttle_scope = "order_creation" if self.action == "create" else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create (public)
    # ------------------------------------------------------------------

    def create(self, request: Request, store_id: str) -> Response:
        """POST /api/v1/stores/{slug}/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.create_order(
            store_id, CreateOrderDTO(**serializer.validated_data)
        )
        return created_response(
            OrderCreatedSerializer(order).data, message="Order placed"
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request, store_id: str) -> Response:
        """GET /api/v1/stores/{id}/orders/

        Query params ``status``, ``type``, ``date`` and ``assigned_to``
        are validated by ``OrderFilter``.  Results are paginated.
        """
        criteria = OrderFilter(request.query_params).to_criteria()
        queryset = self._service.list_orders(store_id, criteria)
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(OrderSerializer(page, many=True).data)

    def retrieve(self, request: Request, store_id: str, order_id: str) -> Response:
        order = self._service.get_order(store_id, order_id)
        return success_response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, store_id: str, order_id: str) -> Response:
        """PATCH .../orders/{order_id}/status/

        ``CANCELLED`` is accepted and recorded as a store cancellation
        with the optional ``reason``.
        """
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.update_status(
            store_id,
            order_id,
            serializer.validated_data["status"],
            reason=serializer.validated_data["reason"],
        )
        return success_response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def assign(self, request: Request, store_id: str, order_id: str) -> Response:
        serializer = AssignDeliverySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.assign_delivery(
            store_id, order_id, serializer.validated_data["delivery_user_id"]
        )
        return success_response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="confirm-payment")
    def confirm_payment(self, request: Request, store_id: str, order_id: str) -> Response:
        order = self._service.confirm_payment(store_id, order_id)
        return success_response(OrderSerializer(order).data, message="Payment confirmed")

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, store_id: str, order_id: str) -> Response:
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.cancel_by_store(
            store_id, order_id, serializer.validated_data["reason"]
        )
        return success_response(OrderSerializer(order).data, message="Order cancelled")


class PublicOrderViewSet(GenericViewSet):
    """Customer tracking page: read the order and cancel it in time."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    lookup_url_kwarg = "order_id"
    lookup_value_regex = "[0-9a-fA-F-]{36}"
    queryset = Order.objects.none()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    @action(detail=True, methods=["get"])
    def track(self, request: Request, order_id: str) -> Response:
        order = self._service.track_order(order_id)
        return success_response(OrderTrackingSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, order_id: str) -> Response:
        order = self._service.cancel_by_customer(order_id)
        return success_response(
            OrderTrackingSerializer(order).data, message="Order cancelled"
        )
