"""Account service layer: onboarding, login and profile management."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.accounts.exceptions import (
    EmailAlreadyRegistered,
    IncorrectPassword,
    InvalidCredentials,
    UserNotFound,
)
from modules.accounts.models import User
from modules.accounts.tokens import issue_access_token
from modules.core.unit_of_work import UnitOfWork
from modules.delivery.services import DeliverySlotService, DeliveryZoneService
from modules.stores.constants import MemberRole
from modules.stores.models import Store, StoreMember, StoreSettings
from modules.stores.slugs import unique_store_slug

if TYPE_CHECKING:
    from modules.accounts.dtos import (
        ChangePasswordDTO,
        LoginDTO,
        RegisterDTO,
        UpdateProfileDTO,
    )

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Registration:
    user: User
    store: Store
    token: str


@dataclass(frozen=True)
class Session:
    user: User
    memberships: List[StoreMember]
    token: str


def active_memberships(user: User) -> List[StoreMember]:
    return list(
        StoreMember.objects.select_related("store")
        .filter(user=user, is_active=True)
        .order_by("joined_at")
    )


class AuthService:
    def __init__(self) -> None:
        self._slots = DeliverySlotService()
        self._zones = DeliveryZoneService()

    def register(self, dto: RegisterDTO) -> Registration:
        """Create the owner, the store and its delivery setup in one unit.

        Any failing step (overlapping slots, duplicate email) rolls back
        every row written before it.
        """
        email = dto.email.lower()
        if User.objects.filter(email=email).exists():
            raise EmailAlreadyRegistered()

        with UnitOfWork() as uow:
            user = User.objects.create_user(
                email=email, password=dto.password, name=dto.name, phone=dto.phone
            )
            store = Store.objects.create(
                name=dto.store_name,
                slug=unique_store_slug(dto.store_name),
                phone=dto.store_phone,
                logo=dto.store_logo,
                address=dto.store_address,
                latitude=dto.store_latitude,
                longitude=dto.store_longitude,
                currency=dto.currency,
                owner=user,
            )
            StoreSettings.objects.create(
                store=store,
                accepts_cash=dto.accepts_cash,
                accepts_transfer=dto.accepts_transfer,
                bank_name=dto.bank_name or "",
                bank_account_holder=dto.bank_account_holder or "",
                bank_account_number=dto.bank_account_number or "",
                bank_alias=dto.bank_alias or "",
                min_advance_hours=dto.min_advance_hours,
                max_advance_days=dto.max_advance_days,
                immediate_cancel_minutes=dto.immediate_cancel_minutes,
                scheduled_cancel_hours=dto.scheduled_cancel_hours,
            )
            StoreMember.objects.create(store=store, user=user, role=MemberRole.OWNER)
            for slot in dto.delivery_slots:
                self._slots.create_slot(store.id, slot)
            for zone in dto.delivery_zones:
                self._zones.create_zone(store.id, zone)

            uow.on_commit(
                lambda: logger.info(
                    "account.registered",
                    user_id=str(user.id),
                    store_id=str(store.id),
                    slug=store.slug,
                )
            )

        return Registration(user=user, store=store, token=issue_access_token(user))

    def login(self, dto: LoginDTO) -> Session:
        user = User.objects.filter(email=dto.email.lower(), is_active=True).first()
        if not user or not user.check_password(dto.password):
            logger.info("account.login_failed", email=dto.email)
            raise InvalidCredentials()

        logger.info("account.login", user_id=str(user.id))
        return Session(
            user=user,
            memberships=active_memberships(user),
            token=issue_access_token(user),
        )

    def get_profile(self, user_id) -> User:
        user = User.objects.filter(id=user_id).first()
        if not user:
            raise UserNotFound()
        return user

    @transaction.atomic
    def update_profile(self, user_id, dto: UpdateProfileDTO) -> User:
        user = self.get_profile(user_id)
        changes = dto.model_dump(exclude_none=True)
        for field, value in changes.items():
            setattr(user, field, value)
        if changes:
            user.save(update_fields=[*changes, "updated_at"])
        return user

    @transaction.atomic
    def change_password(self, user_id, dto: ChangePasswordDTO) -> None:
        user = self.get_profile(user_id)
        if not user.check_password(dto.current_password):
            raise IncorrectPassword()
        user.set_password(dto.new_password)
        user.save(update_fields=["password", "updated_at"])
        logger.info("account.password_changed", user_id=str(user.id))
