"""Delivery DTOs for the Service Layer.

Immutable Pydantic v2 models.  Time-of-day fields are validated as
zero-padded ``HH:MM``; ordering of start/end is a service rule because
updates merge partial input with the stored slot.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, List, Optional

from django.db.models import Q
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from modules.delivery.constants import MIN_ZONE_DISTANCE_KM
from modules.delivery.timeofday import TIME_OF_DAY_PATTERN


def _check_time_of_day(value: str) -> str:
    if not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError("Invalid time format (HH:MM)")
    return value


TimeOfDay = Annotated[str, AfterValidator(_check_time_of_day)]


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------


class DeliveryZoneDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    max_distance: float = Field(ge=MIN_ZONE_DISTANCE_KM)
    delivery_fee: Decimal = Field(ge=0)
    min_order: Decimal = Field(ge=0)
    is_active: bool = True


class UpdateDeliveryZoneDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1)
    max_distance: Optional[float] = Field(default=None, ge=MIN_ZONE_DISTANCE_KM)
    delivery_fee: Optional[Decimal] = Field(default=None, ge=0)
    min_order: Optional[Decimal] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


class DeliverySlotDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(ge=0, le=6)
    start_time: TimeOfDay
    end_time: TimeOfDay
    max_orders_per_hour: int = Field(ge=1)
    is_active: bool = True


class UpdateDeliverySlotDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: Optional[TimeOfDay] = None
    end_time: Optional[TimeOfDay] = None
    max_orders_per_hour: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None


# ---------------------------------------------------------------------------
# Blocked dates
# ---------------------------------------------------------------------------


class BlockedDateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    reason: Optional[str] = ""


class BulkBlockedDatesDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    dates: List[BlockedDateDTO] = Field(min_length=1)


@dataclass(frozen=True)
class BlockedDateRange:
    """Optional inclusive ``[date_from, date_to]`` window for listing."""

    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None

    def to_q(self) -> Q:
        query = Q()
        if self.date_from:
            query &= Q(date__gte=self.date_from)
        if self.date_to:
            query &= Q(date__lte=self.date_to)
        return query
