"""SQLAlchemy models for the reservation service."""
from meydancha.models.user import User
from meydancha.models.field import Field
from meydancha.models.booking import Booking
from meydancha.models.review import Review

__all__ = ["User", "Field", "Booking", "Review"]
