from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from meydancha.models import Field, Review
from meydancha.models.user import ROLE_PLAYER
from meydancha.repository import booking_repository, field_repository, review_repository
from meydancha.schemas import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def _get_field(self, field_id: int) -> Field:
        field = field_repository.get_field(self.db, field_id)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Field not found",
            )
        return field

    def list_reviews(self, field_id: int) -> List[Review]:
        self._get_field(field_id)
        return review_repository.list_reviews(self.db, field_id)

    def submit_review(self, field_id: int, payload: ReviewCreate) -> Review:
        """Create or replace the user's review and refresh the field's rating."""

        field = self._get_field(field_id)
        user = field_repository.get_user(self.db, payload.id_user)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Associated user not found",
            )
        if (user.role or "").lower() != ROLE_PLAYER:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only players can leave reviews",
            )

        if not booking_repository.user_has_confirmed_booking(
            self.db, field_id=field.id_field, user_id=user.id_user
        ):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You must have a confirmed booking to leave a review",
            )

        review = review_repository.get_user_review(
            self.db, field_id=field.id_field, user_id=user.id_user
        )
        try:
            if review is None:
                review = review_repository.add_review(
                    self.db,
                    Review(
                        id_field=field.id_field,
                        id_user=user.id_user,
                        rating=payload.rating,
                        comment=payload.comment,
                    ),
                )
            else:
                review.rating = payload.rating
                review.comment = payload.comment
                self.db.flush()

            average, count = review_repository.rating_summary(self.db, field.id_field)
            field.rating_avg = Decimal(str(average or 0)).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
            field.rating_count = count

            self.db.commit()
            self.db.refresh(review)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to save review",
            ) from exc

        logger.info(
            "Field %s rated %s by user %s (%s reviews)",
            field.id_field,
            payload.rating,
            user.id_user,
            count,
        )
        return review
