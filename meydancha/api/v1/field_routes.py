"""API routes for fields, their daily availability and reviews."""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from meydancha.dependencies import get_db, get_now
from meydancha.schemas import (
    DayAvailabilityResponse,
    FieldCreate,
    FieldResponse,
    FieldUpdate,
    QuoteResponse,
    ReviewCreate,
    ReviewResponse,
)
from meydancha.services import BookingService, FieldService, ReviewService

router = APIRouter(prefix="/fields", tags=["fields"])


@router.get("/", response_model=List[FieldResponse])
def list_fields(
    *,
    db: Session = Depends(get_db),
    sport_type: Optional[str] = Query(None, description="Filter by sport type"),
    city: Optional[str] = Query(None, description="Filter by city"),
    owner_id: Optional[int] = Query(None, description="Filter by owner identifier"),
    sort_by: str = Query(
        "price-low",
        description="Sort order: price-low, price-high or rating",
    ),
):
    service = FieldService(db)
    return service.list_fields(
        sport_type=sport_type,
        city=city,
        owner_id=owner_id,
        sort_by=sort_by,
    )


@router.post("/", response_model=FieldResponse, status_code=status.HTTP_201_CREATED)
def create_field(field_in: FieldCreate, db: Session = Depends(get_db)):
    service = FieldService(db)
    return service.create_field(field_in)


@router.get("/{field_id}", response_model=FieldResponse)
def get_field(field_id: int, db: Session = Depends(get_db)):
    service = FieldService(db)
    return service.get_field(field_id)


@router.put("/{field_id}", response_model=FieldResponse)
def update_field(field_id: int, field_in: FieldUpdate, db: Session = Depends(get_db)):
    service = FieldService(db)
    return service.update_field(field_id, field_in)


@router.delete("/{field_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_field(field_id: int, db: Session = Depends(get_db)):
    service = FieldService(db)
    service.delete_field(field_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{field_id}/time-slots", response_model=DayAvailabilityResponse)
def list_time_slots(
    field_id: int,
    *,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    date_value: Optional[date] = Query(
        None,
        alias="date",
        description=(
            "Date in ISO format (YYYY-MM-DD). Defaults to today in the field's time zone. "
            "Example: /fields/1/time-slots?date=2025-06-01"
        ),
    ),
):
    """Retrieve the field's slots for a day with their status and price."""

    service = BookingService(db, now=now)
    return service.get_day_availability(field_id, date_value)


@router.get("/{field_id}/quote", response_model=QuoteResponse)
def quote_booking(
    field_id: int,
    *,
    db: Session = Depends(get_db),
    date_value: date = Query(..., alias="date", description="Booking date (YYYY-MM-DD)"),
    start_time: str = Query(..., description="Start time (HH:MM)"),
    end_time: str = Query(..., description="End time (HH:MM)"),
):
    """Price a time range on the field without reserving it."""

    service = BookingService(db)
    return service.quote(
        field_id,
        target_date=date_value,
        start_time=start_time,
        end_time=end_time,
    )


@router.get("/{field_id}/reviews", response_model=List[ReviewResponse])
def list_reviews(field_id: int, db: Session = Depends(get_db)):
    service = ReviewService(db)
    return service.list_reviews(field_id)


@router.post(
    "/{field_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_review(field_id: int, payload: ReviewCreate, db: Session = Depends(get_db)):
    """Create the user's review of the field, or replace their earlier one."""

    service = ReviewService(db)
    return service.submit_review(field_id, payload)
