"""Validation errors raised by the availability and pricing engine."""

from __future__ import annotations


class AvailabilityError(ValueError):
    """Base class for rejected booking inputs.

    The message is safe to show to the end user.
    """

    default_message = "Invalid booking request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRange(AvailabilityError):
    default_message = "Invalid time range selected"


class InvalidTimeFormat(AvailabilityError):
    default_message = "Invalid time format (must be HH:MM)"


class InvalidConfiguration(AvailabilityError):
    default_message = "Invalid operating hours configuration"


__all__ = [
    "AvailabilityError",
    "InvalidConfiguration",
    "InvalidRange",
    "InvalidTimeFormat",
]
