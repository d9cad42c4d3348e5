"""Domain services for the reservation service."""

from meydancha.services.booking_service import BookingService
from meydancha.services.field_service import FieldService
from meydancha.services.review_service import ReviewService

__all__ = ["BookingService", "FieldService", "ReviewService"]
