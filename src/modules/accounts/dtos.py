"""Account DTOs for the Service Layer.

``RegisterDTO`` carries the whole onboarding form: the owner account,
the store, its payment and booking settings, and the initial delivery
slots and zones.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from modules.delivery.dtos import DeliverySlotDTO, DeliveryZoneDTO
from modules.stores.constants import Currency


class RegisterDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Owner
    name: str = Field(min_length=2)
    email: str
    password: str = Field(min_length=6)
    phone: str = Field(min_length=6)

    # Store
    store_name: str = Field(min_length=2)
    store_address: str = Field(min_length=5)
    store_latitude: float = Field(ge=-90, le=90)
    store_longitude: float = Field(ge=-180, le=180)
    store_phone: str = Field(min_length=6)
    store_logo: str = ""
    currency: Currency

    # Payments
    accepts_cash: bool
    accepts_transfer: bool
    bank_name: Optional[str] = ""
    bank_account_holder: Optional[str] = ""
    bank_account_number: Optional[str] = ""
    bank_alias: Optional[str] = ""

    # Booking and cancellation
    min_advance_hours: int = Field(ge=1)
    max_advance_days: int = Field(ge=1)
    immediate_cancel_minutes: int = Field(ge=0)
    scheduled_cancel_hours: int = Field(ge=0)

    delivery_slots: List[DeliverySlotDTO] = Field(min_length=1)
    delivery_zones: List[DeliveryZoneDTO] = Field(min_length=1)

    @model_validator(mode="after")
    def payment_methods_are_consistent(self):
        if not (self.accepts_cash or self.accepts_transfer):
            raise ValueError("At least one payment method must be accepted")
        if self.accepts_transfer and not (
            self.bank_name and self.bank_account_holder and self.bank_account_number
        ):
            raise ValueError("Bank details are required when accepting transfers")
        return self


class LoginDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    password: str = Field(min_length=1)


class UpdateProfileDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=2)
    phone: Optional[str] = Field(default=None, min_length=6)


class ChangePasswordDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)
