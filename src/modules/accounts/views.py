"""Authentication API views (``/api/v1/auth/``)."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import ViewSet

from modules.accounts.dtos import (
    ChangePasswordDTO,
    LoginDTO,
    RegisterDTO,
    UpdateProfileDTO,
)
from modules.accounts.serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    ProfileSerializer,
    RegisterSerializer,
    UpdateProfileSerializer,
    UserSerializer,
)
from modules.accounts.services import AuthService
from modules.core.responses import created_response, success_response
from modules.stores.serializers import MembershipSerializer

PUBLIC_ACTIONS = {"register", "login"}


class AuthViewSet(ViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AuthService()

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "auth" if self.action in PUBLIC_ACTIONS else None
        return super().get_throttles()

    @action(detail=False, methods=["post"])
    def register(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = self._service.register(RegisterDTO(**serializer.validated_data))
        return created_response(
            {
                "user": UserSerializer(registration.user).data,
                "store": {
                    "id": str(registration.store.id),
                    "name": registration.store.name,
                    "slug": registration.store.slug,
                    "currency": registration.store.currency,
                },
                "token": registration.token,
            },
            message="Registration successful",
        )

    @action(detail=False, methods=["post"])
    def login(self, request: Request) -> Response:
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = self._service.login(LoginDTO(**serializer.validated_data))
        return success_response(
            {
                "user": UserSerializer(session.user).data,
                "stores": MembershipSerializer(session.memberships, many=True).data,
                "token": session.token,
            }
        )

    @action(detail=False, methods=["get", "patch"])
    def profile(self, request: Request) -> Response:
        if request.method == "GET":
            user = self._service.get_profile(request.user.id)
            return success_response(ProfileSerializer(user).data)

        serializer = UpdateProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self._service.update_profile(
            request.user.id, UpdateProfileDTO(**serializer.validated_data)
        )
        return success_response(UserSerializer(user).data)

    @action(detail=False, methods=["post"], url_path="change-password")
    def change_password(self, request: Request) -> Response:
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self._service.change_password(
            request.user.id, ChangePasswordDTO(**serializer.validated_data)
        )
        return success_response(message="Password updated")
