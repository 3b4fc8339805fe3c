"""Invitation service layer.

Owners and admins invite staff by e-mail.  The invitee accepts with the
token, either creating an account or, when already registered, joining
with the current session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.accounts.models import User
from modules.accounts.tokens import issue_access_token
from modules.core.unit_of_work import UnitOfWork
from modules.invitations.exceptions import (
    AccountAlreadyExists,
    AlreadyMember,
    InvitationAlreadyUsed,
    InvitationEmailMismatch,
    InvitationExpired,
    InvitationNotFound,
    PendingInvitationExists,
    UsedInvitationLocked,
)
from modules.invitations.models import Invitation
from modules.invitations.tasks import send_invitation_email
from modules.stores.exceptions import StoreNotFound
from modules.stores.models import Store, StoreMember

if TYPE_CHECKING:
    from modules.invitations.dtos import AcceptInvitationDTO, CreateInvitationDTO

logger = structlog.get_logger(__name__)


def invitation_link(token: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/invite/{token}"


@dataclass(frozen=True)
class AcceptedInvitation:
    user: User
    store: Store
    role: str
    token: str = ""


class InvitationService:
    # ------------------------------------------------------------------
    # Store side
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, store_id, invited_by: User, dto: CreateInvitationDTO) -> Invitation:
        store = Store.objects.filter(id=store_id).first()
        if not store:
            raise StoreNotFound()

        email = dto.email.lower()
        if StoreMember.objects.filter(
            store=store, user__email=email, is_active=True
        ).exists():
            raise AlreadyMember()

        pending = Invitation.objects.filter(
            store=store, email=email, used_at__isnull=True, expires_at__gt=timezone.now()
        )
        if pending.exists():
            raise PendingInvitationExists()

        invitation = Invitation.objects.create(
            store=store, email=email, role=dto.role, invited_by=invited_by
        )
        self._notify(invitation)
        logger.info(
            "invitation.created",
            store_id=str(store.id),
            invitation_id=str(invitation.id),
            role=invitation.role,
        )
        return invitation

    def list_by_store(self, store_id) -> List[Invitation]:
        return list(
            Invitation.objects.select_related("invited_by").filter(store_id=store_id)
        )

    @transaction.atomic
    def cancel(self, store_id, invitation_id) -> None:
        invitation = self._get_in_store(store_id, invitation_id)
        if invitation.is_used:
            raise UsedInvitationLocked("Cannot cancel a used invitation")
        invitation.delete()
        logger.info("invitation.cancelled", invitation_id=str(invitation_id))

    @transaction.atomic
    def resend(self, store_id, invitation_id) -> Invitation:
        invitation = self._get_in_store(store_id, invitation_id)
        if invitation.is_used:
            raise UsedInvitationLocked("Cannot resend a used invitation")
        invitation.rotate()
        invitation.save(update_fields=["token", "expires_at", "updated_at"])
        self._notify(invitation)
        logger.info("invitation.resent", invitation_id=str(invitation_id))
        return invitation

    # ------------------------------------------------------------------
    # Invitee side
    # ------------------------------------------------------------------

    def get_by_token(self, token: str) -> Invitation:
        """Open invitation for ``token``.

        Raises:
            InvitationNotFound, InvitationAlreadyUsed, InvitationExpired.
        """
        invitation = (
            Invitation.objects.select_related("store", "invited_by")
            .filter(token=token)
            .first()
        )
        if not invitation:
            raise InvitationNotFound()
        if invitation.is_used:
            raise InvitationAlreadyUsed()
        if invitation.is_expired:
            raise InvitationExpired()
        return invitation

    def user_exists(self, invitation: Invitation) -> bool:
        return User.objects.filter(email=invitation.email).exists()

    def accept_new(self, dto: AcceptInvitationDTO) -> AcceptedInvitation:
        """Create the invitee's account and membership in one unit."""
        with UnitOfWork():
            invitation = self._lock_open(dto.token)
            if User.objects.filter(email=invitation.email).exists():
                raise AccountAlreadyExists()

            user = User.objects.create_user(
                email=invitation.email,
                password=dto.password,
                name=dto.name,
                phone=dto.phone or "",
            )
            StoreMember.objects.create(
                store=invitation.store, user=user, role=invitation.role
            )
            self._consume(invitation)

        logger.info(
            "invitation.accepted",
            invitation_id=str(invitation.id),
            user_id=str(user.id),
            new_account=True,
        )
        return AcceptedInvitation(
            user=user,
            store=invitation.store,
            role=invitation.role,
            token=issue_access_token(user),
        )

    def accept_existing(self, token: str, user: User) -> AcceptedInvitation:
        """Join the store with an existing account, reactivating a past membership."""
        with UnitOfWork():
            invitation = self._lock_open(token)
            if user.email.lower() != invitation.email.lower():
                raise InvitationEmailMismatch()

            membership = StoreMember.objects.filter(
                store=invitation.store, user=user
            ).first()
            if membership and membership.is_active:
                raise AlreadyMember("You are already a member of this store")

            if membership:
                membership.is_active = True
                membership.role = invitation.role
                membership.save(update_fields=["is_active", "role", "updated_at"])
            else:
                StoreMember.objects.create(
                    store=invitation.store, user=user, role=invitation.role
                )
            self._consume(invitation)

        logger.info(
            "invitation.accepted",
            invitation_id=str(invitation.id),
            user_id=str(user.id),
            new_account=False,
        )
        return AcceptedInvitation(user=user, store=invitation.store, role=invitation.role)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_in_store(self, store_id, invitation_id) -> Invitation:
        invitation = Invitation.objects.filter(id=invitation_id, store_id=store_id).first()
        if not invitation:
            raise InvitationNotFound()
        return invitation

    def _lock_open(self, token: str) -> Invitation:
        invitation = (
            Invitation.objects.select_for_update()
            .select_related("store")
            .filter(token=token)
            .first()
        )
        if not invitation:
            raise InvitationNotFound()
        if invitation.is_used:
            raise InvitationAlreadyUsed()
        if invitation.is_expired:
            raise InvitationExpired()
        return invitation

    def _consume(self, invitation: Invitation) -> None:
        invitation.used_at = timezone.now()
        invitation.save(update_fields=["used_at", "updated_at"])

    def _notify(self, invitation: Invitation) -> None:
        email, store_name = invitation.email, invitation.store.name
        link = invitation_link(invitation.token)
        transaction.on_commit(
            lambda: send_invitation_email.delay(email, store_name, link)
        )
