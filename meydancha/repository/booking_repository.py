from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from meydancha.models import Booking, Field
from meydancha.models.booking import BOOKING_CONFIRMED


def _normalize_statuses(statuses: Optional[Iterable[str]]) -> List[str]:
    return [
        status_value.strip().lower()
        for status_value in (statuses or ())
        if status_value and status_value.strip()
    ]


def list_bookings(
    db: Session,
    *,
    field_id: int,
    target_date: date,
    statuses: Optional[Sequence[str]] = (BOOKING_CONFIRMED,),
) -> List[Booking]:
    """Return the bookings of one field on one calendar day, ordered by start."""

    query = (
        db.query(Booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.date == target_date)
    )

    normalized_statuses = _normalize_statuses(statuses)
    if normalized_statuses:
        query = query.filter(func.lower(Booking.status).in_(normalized_statuses))

    return query.order_by(Booking.start_time).all()


def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.field))
        .filter(Booking.id_booking == booking_id)
        .first()
    )


def list_bookings_by_user(
    db: Session,
    user_id: int,
    *,
    status_filter: Optional[str] = None,
) -> List[Booking]:
    query = (
        db.query(Booking)
        .options(joinedload(Booking.field))
        .filter(Booking.id_user == user_id)
    )

    if status_filter is not None:
        query = query.filter(func.lower(Booking.status) == status_filter.strip().lower())

    return query.order_by(Booking.date.desc(), Booking.start_time.desc()).all()


def list_bookings_by_owner(
    db: Session,
    owner_id: int,
    *,
    status_filter: Optional[str] = None,
) -> List[Booking]:
    query = (
        db.query(Booking)
        .join(Booking.field)
        .options(joinedload(Booking.field))
        .filter(Field.id_owner == owner_id)
    )

    if status_filter is not None:
        query = query.filter(func.lower(Booking.status) == status_filter.strip().lower())

    return query.order_by(Booking.date.desc(), Booking.start_time.desc()).all()


def user_has_confirmed_booking(db: Session, *, field_id: int, user_id: int) -> bool:
    match = (
        db.query(Booking.id_booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.id_user == user_id)
        .filter(func.lower(Booking.status) == BOOKING_CONFIRMED)
        .first()
    )
    return match is not None


def create_booking(db: Session, booking: Booking) -> Booking:
    db.add(booking)
    db.flush()
    return booking


def save_booking(db: Session, booking: Booking) -> Booking:
    db.flush()
    db.commit()
    db.refresh(booking)
    return booking
