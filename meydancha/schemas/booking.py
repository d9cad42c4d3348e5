"""Pydantic schemas for bookings, availability and price quotes."""

import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from meydancha.schemas.field import FieldSummary

# Shape only; the availability engine rejects impossible values like 25:00.
TIME_PATTERN = r"^[0-9]{2}:[0-9]{2}$"


class BookingCreate(BaseModel):
    """Schema used when a player reserves a field."""

    id_field: int = PydanticField(..., gt=0)
    id_user: int = PydanticField(..., gt=0)
    date: datetime.date
    start_time: str = PydanticField(..., pattern=TIME_PATTERN)
    end_time: str = PydanticField(..., pattern=TIME_PATTERN)


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_booking: int
    id_field: int
    id_user: int
    date: datetime.date
    start_time: str
    end_time: str
    total_price: Decimal
    status: str
    created_at: Optional[datetime.datetime] = None
    field: Optional[FieldSummary] = None


class TimeSlotResponse(BaseModel):
    start_time: str
    end_time: str
    status: str
    price: Decimal


class DayAvailabilityResponse(BaseModel):
    """All slots of a field's day and the subset a player can still book."""

    id_field: int
    date: datetime.date
    timezone: str
    is_open: bool
    slots: List[TimeSlotResponse]
    available_start_times: List[str]


class QuoteResponse(BaseModel):
    id_field: int
    date: datetime.date
    start_time: str
    end_time: str
    minutes: int
    price_per_hour: Decimal
    total_price: Decimal
    currency: str
