from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from meydancha.core.config import settings
from meydancha.models import Booking, Field, User
from meydancha.models.booking import BOOKING_CANCELLED, BOOKING_CONFIRMED
from meydancha.models.user import ROLE_ADMIN, ROLE_OWNER, ROLE_PLAYER
from meydancha.repository import booking_repository, field_repository
from meydancha.schemas import BookingCreate
from meydancha.services.availability import (
    SlotWindow,
    available_slots,
    booking_duration_minutes,
    calculate_price,
    can_cancel,
    filter_past,
    format_time,
    generate_slots,
    is_past,
    is_range_available,
    parse_time,
)
from meydancha.services.working_hours import (
    WeeklySchedule,
    is_within_working_hours,
    parse_working_hours,
    window_for_date,
)

logger = logging.getLogger(__name__)

SLOT_AVAILABLE = "available"
SLOT_BOOKED = "booked"
SLOT_PAST = "past"


class BookingService:
    """Availability, pricing and the booking lifecycle for one request.

    ``now`` is the request's clock reading. It is converted to each field's
    time zone before any past-time decision is made.
    """

    def __init__(self, db: Session, *, now: Optional[datetime] = None):
        self.db = db
        self.now = now or datetime.now(timezone.utc)

    def _get_field(self, field_id: int) -> Field:
        field = field_repository.get_field(self.db, field_id)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Field not found",
            )
        return field

    def _get_user(self, user_id: int) -> User:
        user = field_repository.get_user(self.db, user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Associated user not found",
            )
        return user

    @staticmethod
    def _zone_name(field: Field) -> str:
        return field.timezone or settings.TIMEZONE

    def _local_now(self, field: Field) -> datetime:
        if self.now.tzinfo is None:
            # naive clocks are taken to be on the field's wall clock already
            return self.now
        return self.now.astimezone(ZoneInfo(self._zone_name(field)))

    @staticmethod
    def _default_window() -> SlotWindow:
        return SlotWindow(
            settings.SLOT_DAY_START,
            settings.SLOT_DAY_END,
            settings.SLOT_MINUTES,
        )

    @staticmethod
    def _schedule(field: Field) -> Optional[WeeklySchedule]:
        return parse_working_hours(field.working_hours)

    def get_day_availability(
        self,
        field_id: int,
        target_date: Optional[date] = None,
    ) -> dict:
        """Every slot of the field's day with its status and price."""

        field = self._get_field(field_id)
        local_now = self._local_now(field)
        target_date = target_date or local_now.date()

        result = {
            "id_field": field.id_field,
            "date": target_date,
            "timezone": self._zone_name(field),
            "is_open": False,
            "slots": [],
            "available_start_times": [],
        }

        window = window_for_date(self._schedule(field), target_date, self._default_window())
        if window is None:
            return result

        slots = generate_slots(window)
        bookings = booking_repository.list_bookings(
            self.db,
            field_id=field.id_field,
            target_date=target_date,
        )

        free = available_slots(slots, target_date, bookings)
        bookable = filter_past(free, target_date, local_now)
        free_set = set(free)
        bookable_set = set(bookable)

        slot_rows: List[dict] = []
        for slot in slots:
            if slot not in free_set:
                slot_status = SLOT_BOOKED
            elif slot not in bookable_set:
                slot_status = SLOT_PAST
            else:
                slot_status = SLOT_AVAILABLE

            slot_end = format_time(parse_time(slot) + window.step_minutes)
            slot_rows.append(
                {
                    "start_time": slot,
                    "end_time": slot_end,
                    "status": slot_status,
                    "price": calculate_price(field.price_per_hour, slot, slot_end),
                }
            )

        result["is_open"] = True
        result["slots"] = slot_rows
        result["available_start_times"] = bookable
        return result

    def quote(
        self,
        field_id: int,
        *,
        target_date: date,
        start_time: str,
        end_time: str,
    ) -> dict:
        field = self._get_field(field_id)
        minutes = booking_duration_minutes(start_time, end_time)

        return {
            "id_field": field.id_field,
            "date": target_date,
            "start_time": start_time,
            "end_time": end_time,
            "minutes": minutes,
            "price_per_hour": field.price_per_hour,
            "total_price": calculate_price(field.price_per_hour, start_time, end_time),
            "currency": settings.CURRENCY,
        }

    def create_booking(self, payload: BookingCreate) -> Booking:
        user = self._get_user(payload.id_user)
        role = (user.role or "").lower()
        if role != ROLE_PLAYER:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    "Owners cannot book fields. Please use the owner dashboard to manage your fields."
                    if role == ROLE_OWNER
                    else "Admins cannot book fields."
                ),
            )

        booking_duration_minutes(payload.start_time, payload.end_time)

        # The lock is held until commit so concurrent requests for this field
        # cannot both pass the overlap check below.
        field = field_repository.lock_field(self.db, payload.id_field)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Field not found",
            )

        if is_past(payload.date, payload.start_time, self._local_now(field)):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot book a time slot in the past. Please select a future date and time.",
            )

        if not is_within_working_hours(
            self._schedule(field),
            payload.date,
            payload.start_time,
            payload.end_time,
            self._default_window(),
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    "Booking time is outside field working hours. Please select a time "
                    "within the field's operating hours."
                ),
            )

        existing = booking_repository.list_bookings(
            self.db,
            field_id=field.id_field,
            target_date=payload.date,
        )
        if not is_range_available(payload.start_time, payload.end_time, payload.date, existing):
            logger.warning(
                "Rejected overlapping booking for field %s on %s %s-%s",
                field.id_field,
                payload.date,
                payload.start_time,
                payload.end_time,
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Time slot is already booked",
            )

        booking = Booking(
            id_field=field.id_field,
            id_user=user.id_user,
            date=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            total_price=calculate_price(
                field.price_per_hour, payload.start_time, payload.end_time
            ),
            status=BOOKING_CONFIRMED,
        )

        try:
            booking_repository.create_booking(self.db, booking)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create booking",
            ) from exc

        logger.info(
            "Booking %s created: field %s on %s %s-%s for %s",
            booking.id_booking,
            booking.id_field,
            booking.date,
            booking.start_time,
            booking.end_time,
            booking.total_price,
        )
        return booking_repository.get_booking(self.db, booking.id_booking)

    def get_booking(self, booking_id: int) -> Booking:
        booking = booking_repository.get_booking(self.db, booking_id)
        if booking is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found",
            )
        return booking

    def cancel_booking(self, booking_id: int, user_id: int) -> Booking:
        booking = self.get_booking(booking_id)
        user = self._get_user(user_id)
        role = (user.role or "").lower()

        if booking.id_user != user.id_user and role != ROLE_ADMIN:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unauthorized: You can only cancel your own bookings",
            )

        if (booking.status or "").lower() == BOOKING_CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Booking is already cancelled",
            )

        min_notice = settings.CANCELLATION_MIN_HOURS
        if not can_cancel(
            booking.date,
            booking.start_time,
            self._local_now(booking.field),
            min_notice_hours=min_notice,
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    "Cannot cancel booking. Cancellation must be at least "
                    f"{min_notice:g} hours before the booking time."
                ),
            )

        booking.status = BOOKING_CANCELLED
        try:
            booking_repository.save_booking(self.db, booking)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to cancel booking",
            ) from exc

        logger.info("Booking %s cancelled by user %s", booking.id_booking, user.id_user)
        return booking

    def list_user_bookings(
        self,
        user_id: int,
        *,
        status_filter: Optional[str] = None,
    ) -> List[Booking]:
        self._get_user(user_id)
        return booking_repository.list_bookings_by_user(
            self.db, user_id, status_filter=status_filter
        )

    def list_owner_bookings(
        self,
        owner_id: int,
        *,
        status_filter: Optional[str] = None,
    ) -> List[Booking]:
        self._get_user(owner_id)
        return booking_repository.list_bookings_by_owner(
            self.db, owner_id, status_filter=status_filter
        )
