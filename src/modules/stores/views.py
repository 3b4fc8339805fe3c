"""Store API views: profile, settings and staff management."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.responses import success_response
from modules.stores.constants import ALL_ROLES, MANAGER_ROLES
from modules.stores.dtos import (
    UpdateMemberRoleDTO,
    UpdateStoreDTO,
    UpdateStoreSettingsDTO,
)
from modules.stores.permissions import IsStoreMember
from modules.stores.serializers import (
    PublicStoreSerializer,
    StoreMemberSerializer,
    StoreSerializer,
    StoreSettingsSerializer,
    UpdateMemberRoleSerializer,
    UpdateStoreSerializer,
    UpdateStoreSettingsSerializer,
)
from modules.stores.services import StoreService


class StoreViewSet(GenericViewSet):
    """``/stores/{store_id}/``: the store itself, its settings and staff."""

    permission_classes = [IsStoreMember]
    lookup_url_kwarg = "store_id"
    store_roles = {
        "default": ALL_ROLES,
        "partial_update": MANAGER_ROLES,
        "update_settings": MANAGER_ROLES,
    }

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StoreService()

    def retrieve(self, request: Request, store_id: str) -> Response:
        store = self._service.get_store(store_id)
        return success_response(StoreSerializer(store).data)

    def partial_update(self, request: Request, store_id: str) -> Response:
        serializer = UpdateStoreSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store = self._service.update_store(
            store_id, UpdateStoreDTO(**serializer.validated_data)
        )
        return success_response(StoreSerializer(store).data)

    @action(detail=True, methods=["patch"], url_path="settings")
    def update_settings(self, request: Request, store_id: str) -> Response:
        serializer = UpdateStoreSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store_settings = self._service.update_settings(
            store_id, UpdateStoreSettingsDTO(**serializer.validated_data)
        )
        return success_response(StoreSettingsSerializer(store_settings).data)

    @action(detail=True, methods=["get"], url_path="delivery-members")
    def delivery_members(self, request: Request, store_id: str) -> Response:
        members = self._service.get_delivery_members(store_id)
        return success_response(StoreMemberSerializer(members, many=True).data)


class StoreMemberViewSet(GenericViewSet):
    """``/stores/{store_id}/members/``: staff list and role management."""

    permission_classes = [IsStoreMember]
    lookup_url_kwarg = "member_id"
    lookup_value_regex = "[0-9a-fA-F-]{36}"
    store_roles = {"default": MANAGER_ROLES, "list": ALL_ROLES}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StoreService()

    def list(self, request: Request, store_id: str) -> Response:
        members = self._service.get_members(store_id)
        return success_response(StoreMemberSerializer(members, many=True).data)

    def partial_update(self, request: Request, store_id: str, member_id: str) -> Response:
        serializer = UpdateMemberRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        member = self._service.update_member_role(
            store_id, member_id, UpdateMemberRoleDTO(**serializer.validated_data)
        )
        return success_response(StoreMemberSerializer(member).data)

    def destroy(self, request: Request, store_id: str, member_id: str) -> Response:
        self._service.remove_member(store_id, member_id, acting_user_id=request.user.id)
        return success_response(message="Member removed")


class PublicStoreViewSet(GenericViewSet):
    """``/stores/{slug}/public/``: storefront data, no authentication."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    lookup_field = "slug"
    lookup_url_kwarg = "slug"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StoreService()

    @action(detail=True, methods=["get"])
    def public(self, request: Request, slug: str) -> Response:
        store = self._service.get_public_store(slug)
        return success_response(PublicStoreSerializer(store).data)
