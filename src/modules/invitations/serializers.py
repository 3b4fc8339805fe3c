"""Invitation DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.invitations.models import INVITABLE_ROLES, Invitation
from modules.invitations.services import invitation_link

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateInvitationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = serializers.ChoiceField(
        choices=[role.value for role in INVITABLE_ROLES],
        error_messages={"invalid_choice": "Role must be ADMIN, CASHIER, or DELIVERY"},
    )


class AcceptInvitationSerializer(serializers.Serializer):
    token = serializers.CharField()
    name = serializers.CharField(min_length=2, max_length=255)
    password = serializers.CharField(min_length=6, write_only=True)
    phone = serializers.CharField(required=False, default="", allow_blank=True)


class AcceptExistingSerializer(serializers.Serializer):
    token = serializers.CharField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class InvitationSerializer(serializers.ModelSerializer):
    """Store-side listing entry."""

    invited_by = serializers.CharField(source="invited_by.name", read_only=True)
    is_used = serializers.BooleanField(read_only=True)
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = Invitation
        fields = [
            "id",
            "email",
            "role",
            "invited_by",
            "created_at",
            "expires_at",
            "is_used",
            "is_expired",
        ]
        read_only_fields = fields


class IssuedInvitationSerializer(serializers.ModelSerializer):
    """Returned on create and resend; carries the shareable link."""

    store_name = serializers.CharField(source="store.name", read_only=True)
    invited_by = serializers.CharField(source="invited_by.name", read_only=True)
    invitation_link = serializers.SerializerMethodField()

    class Meta:
        model = Invitation
        fields = [
            "id",
            "email",
            "role",
            "store_name",
            "invited_by",
            "expires_at",
            "invitation_link",
        ]
        read_only_fields = fields

    def get_invitation_link(self, invitation: Invitation) -> str:
        return invitation_link(invitation.token)


class InvitationStoreSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    logo = serializers.CharField(read_only=True)


class PublicInvitationSerializer(serializers.ModelSerializer):
    """What the invitee sees before accepting."""

    store = InvitationStoreSerializer(read_only=True)
    invited_by = serializers.CharField(source="invited_by.name", read_only=True)
    user_exists = serializers.SerializerMethodField()

    class Meta:
        model = Invitation
        fields = ["id", "email", "role", "store", "invited_by", "expires_at", "user_exists"]
        read_only_fields = fields

    def get_user_exists(self, invitation: Invitation) -> bool:
        return bool(self.context.get("user_exists"))
