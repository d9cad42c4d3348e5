from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from meydancha.models import Review


def list_reviews(db: Session, field_id: int) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.id_field == field_id)
        .order_by(Review.created_at.desc(), Review.id_review.desc())
        .all()
    )


def get_user_review(db: Session, *, field_id: int, user_id: int) -> Optional[Review]:
    return (
        db.query(Review)
        .filter(Review.id_field == field_id)
        .filter(Review.id_user == user_id)
        .first()
    )


def add_review(db: Session, review: Review) -> Review:
    db.add(review)
    db.flush()
    return review


def rating_summary(db: Session, field_id: int) -> Tuple[Optional[float], int]:
    """Return ``(average, count)`` of the ratings left on a field."""

    average, count = (
        db.query(func.avg(Review.rating), func.count(Review.id_review))
        .filter(Review.id_field == field_id)
        .one()
    )
    return average, int(count or 0)
