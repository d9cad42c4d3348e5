from __future__ import annotations

from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field as PydanticField, field_validator

SPORT_TYPES = ("football", "basketball", "padel", "tennis")


def _normalize_sport_type(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in SPORT_TYPES:
        raise ValueError(f"sport_type must be one of: {', '.join(SPORT_TYPES)}")
    return normalized


def _validate_timezone(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    try:
        ZoneInfo(value.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone '{value}'") from exc
    return value.strip()


class FieldBase(BaseModel):
    name: str = PydanticField(..., min_length=1, max_length=200)
    sport_type: str
    city: str = PydanticField(..., min_length=1, max_length=100)
    address: str = PydanticField(..., min_length=1)
    price_per_hour: Decimal = PydanticField(..., gt=0, max_digits=10, decimal_places=2)
    working_hours: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator("sport_type")
    @classmethod
    def validate_sport_type(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_sport_type(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        return _validate_timezone(value)


class FieldCreate(FieldBase):
    id_owner: int = PydanticField(..., gt=0)


class FieldUpdate(BaseModel):
    name: Optional[str] = PydanticField(None, min_length=1, max_length=200)
    sport_type: Optional[str] = None
    city: Optional[str] = PydanticField(None, min_length=1, max_length=100)
    address: Optional[str] = PydanticField(None, min_length=1)
    price_per_hour: Optional[Decimal] = PydanticField(
        None, gt=0, max_digits=10, decimal_places=2
    )
    working_hours: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator("sport_type")
    @classmethod
    def validate_sport_type(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_sport_type(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        return _validate_timezone(value)


class FieldResponse(FieldBase):
    model_config = ConfigDict(from_attributes=True)

    id_field: int
    id_owner: int
    rating_avg: Decimal = Decimal("0")
    rating_count: int = 0


class FieldSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_field: int
    name: str
    sport_type: str
    city: str
