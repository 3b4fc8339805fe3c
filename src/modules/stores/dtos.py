"""Store DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.stores.constants import MemberRole


class UpdateStoreDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    logo: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = Field(default=None, min_length=5)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    is_active: Optional[bool] = None


class UpdateStoreSettingsDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    accepts_cash: Optional[bool] = None
    accepts_transfer: Optional[bool] = None
    bank_name: Optional[str] = None
    bank_account_holder: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_alias: Optional[str] = None
    min_advance_hours: Optional[int] = Field(default=None, ge=1)
    max_advance_days: Optional[int] = Field(default=None, ge=1)
    immediate_cancel_minutes: Optional[int] = Field(default=None, ge=0)
    scheduled_cancel_hours: Optional[int] = Field(default=None, ge=0)


class UpdateMemberRoleDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: MemberRole
