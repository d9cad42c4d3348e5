from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from meydancha.core.exceptions import InvalidConfiguration
from meydancha.models import Field, User
from meydancha.models.user import ROLE_ADMIN, ROLE_OWNER
from meydancha.repository import field_repository
from meydancha.schemas import FieldCreate, FieldUpdate
from meydancha.services.working_hours import parse_working_hours, serialize_working_hours

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("price-low", "price-high", "rating")
_NULLABLE_ATTRIBUTES = ("working_hours", "timezone")


class FieldService:
    def __init__(self, db: Session):
        self.db = db

    def list_fields(
        self,
        *,
        sport_type: Optional[str] = None,
        city: Optional[str] = None,
        owner_id: Optional[int] = None,
        sort_by: str = "price-low",
    ) -> list[Field]:
        if sort_by not in SORT_OPTIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"sort_by must be one of: {', '.join(SORT_OPTIONS)}",
            )

        return field_repository.list_fields(
            self.db,
            sport_type=sport_type,
            city=city,
            owner_id=owner_id,
            sort_by=sort_by,
        )

    def get_field(self, field_id: int) -> Field:
        field = field_repository.get_field(self.db, field_id)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Field {field_id} not found",
            )
        return field

    def create_field(self, field_in: FieldCreate) -> Field:
        self._ensure_owner(field_in.id_owner)

        field_data = field_in.model_dump()
        field_data["working_hours"] = self._normalize_working_hours(
            field_data.get("working_hours")
        )
        field = Field(**field_data)
        self._validate_field_entity(field)

        try:
            field_repository.create_field(self.db, field)
            self.db.commit()
            self.db.refresh(field)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create field",
            ) from exc

        logger.info("Created field %s for owner %s", field.id_field, field.id_owner)
        return field

    def update_field(self, field_id: int, field_in: FieldUpdate) -> Field:
        field = self.get_field(field_id)
        update_data = {
            attr: value
            for attr, value in field_in.model_dump(exclude_unset=True).items()
            if value is not None or attr in _NULLABLE_ATTRIBUTES
        }

        if "working_hours" in update_data:
            update_data["working_hours"] = self._normalize_working_hours(
                update_data["working_hours"]
            )

        for attr, value in update_data.items():
            setattr(field, attr, value)

        self._validate_field_entity(field)

        try:
            self.db.flush()
            self.db.commit()
            self.db.refresh(field)
            return field
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update field",
            ) from exc

    def delete_field(self, field_id: int) -> None:
        field = self.get_field(field_id)
        try:
            field_repository.delete_field(self.db, field)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete field",
            ) from exc

    def _ensure_owner(self, owner_id: int) -> User:
        owner = field_repository.get_user(self.db, owner_id)
        if owner is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Owner {owner_id} not found",
            )
        if (owner.role or "").lower() not in (ROLE_OWNER, ROLE_ADMIN):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only field owners can manage fields",
            )
        return owner

    @staticmethod
    def _normalize_working_hours(raw: Optional[str]) -> Optional[str]:
        try:
            schedule = parse_working_hours(raw)
        except InvalidConfiguration as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"working_hours: {exc.message}",
            ) from exc
        return serialize_working_hours(schedule)

    def _validate_field_entity(self, field: Field) -> None:
        if field.price_per_hour is None or field.price_per_hour <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="price_per_hour must be greater than zero",
            )
