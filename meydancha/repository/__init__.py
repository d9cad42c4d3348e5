"""Repository helpers for the reservation service."""

from meydancha.repository import booking_repository, field_repository, review_repository

__all__ = ["booking_repository", "field_repository", "review_repository"]
