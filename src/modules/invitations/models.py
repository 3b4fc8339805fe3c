"""Staff invitations.

An invitation grants a non-owner role in a store to whoever holds its
token.  It is consumed once (``used_at``) and expires after
``INVITATION_TTL_DAYS``; resending rotates the token and the expiry.
"""

from __future__ import annotations

import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.stores.constants import MemberRole

INVITABLE_ROLES = (MemberRole.ADMIN, MemberRole.CASHIER, MemberRole.DELIVERY)


def new_token() -> str:
    return secrets.token_hex(32)


def new_expiry():
    return timezone.now() + timedelta(days=settings.INVITATION_TTL_DAYS)


class Invitation(BaseModel):
    store = models.ForeignKey(
        "stores.Store", on_delete=models.CASCADE, related_name="invitations"
    )
    email = models.EmailField()
    role = models.CharField(
        max_length=16, choices=[(role.value, role.label) for role in INVITABLE_ROLES]
    )
    token = models.CharField(max_length=64, unique=True, default=new_token)
    expires_at = models.DateTimeField(default=new_expiry)
    used_at = models.DateTimeField(null=True, blank=True)
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_invitations",
    )

    class Meta:
        db_table = "invitations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["store", "email"], name="invitations_store_email_idx"),
        ]

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    @property
    def is_expired(self) -> bool:
        return self.expires_at < timezone.now()

    def rotate(self) -> None:
        self.token = new_token()
        self.expires_at = new_expiry()

    def __str__(self) -> str:
        return f"{self.email} -> {self.store_id} ({self.role})"
