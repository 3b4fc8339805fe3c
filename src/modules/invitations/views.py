"""Invitation API views.

Store side (``stores/{id}/invitations/``) is limited to OWNER and ADMIN;
the invitee side (``invitations/``) is public except
``accept-existing``, which joins with the caller's account.
"""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet, ViewSet

from modules.accounts.serializers import UserSerializer
from modules.core.responses import created_response, success_response
from modules.invitations.dtos import AcceptInvitationDTO, CreateInvitationDTO
from modules.invitations.models import Invitation
from modules.invitations.serializers import (
    AcceptExistingSerializer,
    AcceptInvitationSerializer,
    CreateInvitationSerializer,
    InvitationSerializer,
    IssuedInvitationSerializer,
    PublicInvitationSerializer,
)
from modules.invitations.services import InvitationService
from modules.stores.constants import MANAGER_ROLES
from modules.stores.permissions import IsStoreMember


def _joined_store(accepted) -> dict:
    return {
        "id": str(accepted.store.id),
        "name": accepted.store.name,
        "slug": accepted.store.slug,
    }


class StoreInvitationViewSet(GenericViewSet):
    permission_classes = [IsStoreMember]
    store_roles = {"default": MANAGER_ROLES}
    lookup_url_kwarg = "invitation_id"
    lookup_value_regex = "[0-9a-fA-F-]{36}"
    queryset = Invitation.objects.none()
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = InvitationService()

    def list(self, request: Request, store_id: str) -> Response:
        invitations = self._service.list_by_store(store_id)
        return success_response(InvitationSerializer(invitations, many=True).data)

    def create(self, request: Request, store_id: str) -> Response:
        serializer = CreateInvitationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invitation = self._service.create(
            store_id, request.user, CreateInvitationDTO(**serializer.validated_data)
        )
        return created_response(
            IssuedInvitationSerializer(invitation).data, message="Invitation sent"
        )

    def destroy(self, request: Request, store_id: str, invitation_id: str) -> Response:
        self._service.cancel(store_id, invitation_id)
        return success_response(message="Invitation cancelled")

    @action(detail=True, methods=["post"])
    def resend(self, request: Request, store_id: str, invitation_id: str) -> Response:
        invitation = self._service.resend(store_id, invitation_id)
        return success_response(
            IssuedInvitationSerializer(invitation).data, message="Invitation resent"
        )


class InvitationViewSet(ViewSet):
    lookup_field = "token"
    lookup_value_regex = "[0-9a-f]{64}"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = InvitationService()

    def get_permissions(self):
        if self.action == "accept_existing":
            return [IsAuthenticated()]
        return [AllowAny()]

    def retrieve(self, request: Request, token: str) -> Response:
        invitation = self._service.get_by_token(token)
        serializer = PublicInvitationSerializer(
            invitation, context={"user_exists": self._service.user_exists(invitation)}
        )
        return success_response(serializer.data)

    @action(detail=False, methods=["post"])
    def accept(self, request: Request) -> Response:
        serializer = AcceptInvitationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        accepted = self._service.accept_new(
            AcceptInvitationDTO(**serializer.validated_data)
        )
        return created_response(
            {
                "user": UserSerializer(accepted.user).data,
                "store": _joined_store(accepted),
                "role": accepted.role,
                "token": accepted.token,
            },
            message="Invitation accepted",
        )

    @action(detail=False, methods=["post"], url_path="accept-existing")
    def accept_existing(self, request: Request) -> Response:
        serializer = AcceptExistingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        accepted = self._service.accept_existing(
            serializer.validated_data["token"], request.user
        )
        return success_response(
            {"store": _joined_store(accepted), "role": accepted.role},
            message="Invitation accepted",
        )
