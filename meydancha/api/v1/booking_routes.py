"""API routes for managing bookings."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from meydancha.dependencies import get_db, get_now
from meydancha.schemas import BookingCreate, BookingResponse
from meydancha.services import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/", response_model=List[BookingResponse])
def list_user_bookings(
    *,
    db: Session = Depends(get_db),
    user_id: int = Query(..., description="User whose bookings are listed"),
    status: Optional[str] = Query(None, description="Filter bookings by status"),
) -> List[BookingResponse]:
    """Retrieve a user's bookings ordered from newest to oldest."""

    service = BookingService(db)
    return service.list_user_bookings(user_id, status_filter=status)


@router.get("/owners/{owner_id}", response_model=List[BookingResponse])
def list_owner_bookings(
    owner_id: int,
    *,
    db: Session = Depends(get_db),
    status: Optional[str] = Query(None, description="Filter bookings by status"),
) -> List[BookingResponse]:
    """Retrieve the bookings made on every field of an owner."""

    service = BookingService(db)
    return service.list_owner_bookings(owner_id, status_filter=status)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: int, db: Session = Depends(get_db)) -> BookingResponse:
    service = BookingService(db)
    return service.get_booking(booking_id)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> BookingResponse:
    """Reserve a time range on a field."""

    service = BookingService(db, now=now)
    return service.create_booking(payload)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    *,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user_id: int = Query(..., description="User requesting the cancellation"),
) -> BookingResponse:
    service = BookingService(db, now=now)
    return service.cancel_booking(booking_id, user_id)
