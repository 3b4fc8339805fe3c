"""Invitation DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateInvitationDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    role: Literal["ADMIN", "CASHIER", "DELIVERY"]


class AcceptInvitationDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    name: str = Field(min_length=2)
    password: str = Field(min_length=6)
    phone: Optional[str] = ""
