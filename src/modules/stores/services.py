"""Store service layer: store profile, settings and staff management."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.stores.constants import MemberRole
from modules.stores.exceptions import (
    MemberNotFound,
    OwnerNotRemovable,
    OwnerRoleLocked,
    OwnerRoleNotAssignable,
    PaymentMethodRequired,
    SelfRemovalNotAllowed,
    StoreNotFound,
)
from modules.stores.models import Store, StoreMember, StoreSettings
from modules.stores.slugs import unique_store_slug

if TYPE_CHECKING:
    from modules.stores.dtos import (
        UpdateMemberRoleDTO,
        UpdateStoreDTO,
        UpdateStoreSettingsDTO,
    )

logger = structlog.get_logger(__name__)


class StoreService:
    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_store(self, store_id) -> Store:
        store = (
            Store.objects.select_related("settings", "owner").filter(id=store_id).first()
        )
        if not store:
            raise StoreNotFound()
        return store

    def get_public_store(self, slug: str) -> Store:
        """Return an active store by slug; inactive stores are hidden."""
        store = Store.objects.select_related("settings").filter(slug=slug).first()
        if not store or not store.is_active:
            raise StoreNotFound()
        return store

    def get_members(self, store_id) -> List[StoreMember]:
        return list(
            StoreMember.objects.select_related("user")
            .filter(store_id=store_id)
            .order_by("joined_at")
        )

    def get_delivery_members(self, store_id) -> List[StoreMember]:
        return list(
            StoreMember.objects.select_related("user").filter(
                store_id=store_id, role=MemberRole.DELIVERY, is_active=True
            )
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_store(self, store_id, dto: UpdateStoreDTO) -> Store:
        store = self.get_store(store_id)
        changes = dto.model_dump(exclude_none=True)
        if "name" in changes and changes["name"] != store.name:
            store.slug = unique_store_slug(changes["name"], exclude_id=store.id)
        for field, value in changes.items():
            setattr(store, field, value)
        store.save()
        logger.info("store.updated", store_id=str(store.id), fields=sorted(changes))
        return store

    @transaction.atomic
    def update_settings(self, store_id, dto: UpdateStoreSettingsDTO) -> StoreSettings:
        store_settings = StoreSettings.objects.select_for_update().filter(
            store_id=store_id
        ).first()
        if not store_settings:
            raise StoreNotFound()

        changes = dto.model_dump(exclude_none=True)
        for field, value in changes.items():
            setattr(store_settings, field, value)
        if not (store_settings.accepts_cash or store_settings.accepts_transfer):
            raise PaymentMethodRequired()

        store_settings.save()
        logger.info("store.settings_updated", store_id=str(store_id), fields=sorted(changes))
        return store_settings

    @transaction.atomic
    def update_member_role(
        self, store_id, member_id, dto: UpdateMemberRoleDTO
    ) -> StoreMember:
        member = self._get_member(store_id, member_id)
        if member.is_owner:
            raise OwnerRoleLocked()
        if dto.role == MemberRole.OWNER:
            raise OwnerRoleNotAssignable()

        member.role = dto.role
        member.save(update_fields=["role"])
        logger.info(
            "store.member_role_updated",
            store_id=str(store_id),
            member_id=str(member_id),
            role=member.role,
        )
        return member

    @transaction.atomic
    def remove_member(self, store_id, member_id, acting_user_id) -> None:
        """Deactivate a membership. The row is kept for order history."""
        member = self._get_member(store_id, member_id)
        if member.is_owner:
            raise OwnerNotRemovable()
        if member.user_id == acting_user_id:
            raise SelfRemovalNotAllowed()

        member.is_active = False
        member.save(update_fields=["is_active"])
        logger.info("store.member_removed", store_id=str(store_id), member_id=str(member_id))

    def _get_member(self, store_id, member_id) -> StoreMember:
        member = (
            StoreMember.objects.select_related("user")
            .filter(id=member_id, store_id=store_id)
            .first()
        )
        if not member:
            raise MemberNotFound()
        return member
