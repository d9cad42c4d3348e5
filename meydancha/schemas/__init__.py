"""Pydantic schemas for the reservation service."""

from meydancha.schemas.booking import (
    BookingCreate,
    BookingResponse,
    DayAvailabilityResponse,
    QuoteResponse,
    TimeSlotResponse,
)
from meydancha.schemas.field import FieldCreate, FieldResponse, FieldSummary, FieldUpdate
from meydancha.schemas.review import ReviewCreate, ReviewResponse

__all__ = [
    "BookingCreate",
    "BookingResponse",
    "DayAvailabilityResponse",
    "FieldCreate",
    "FieldResponse",
    "FieldSummary",
    "FieldUpdate",
    "QuoteResponse",
    "ReviewCreate",
    "ReviewResponse",
    "TimeSlotResponse",
]
