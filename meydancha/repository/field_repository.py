from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from meydancha.models import Field, User

_SORT_ORDERS = {
    "price-low": (Field.price_per_hour.asc(), Field.id_field),
    "price-high": (Field.price_per_hour.desc(), Field.id_field),
    "rating": (Field.rating_avg.desc(), Field.rating_count.desc(), Field.id_field),
}


def list_fields(
    db: Session,
    *,
    sport_type: Optional[str] = None,
    city: Optional[str] = None,
    owner_id: Optional[int] = None,
    sort_by: str = "price-low",
) -> List[Field]:
    query = db.query(Field)

    if sport_type is not None and sport_type.strip():
        query = query.filter(Field.sport_type == sport_type.strip().lower())
    if city is not None and city.strip():
        query = query.filter(Field.city == city.strip())
    if owner_id is not None:
        query = query.filter(Field.id_owner == owner_id)

    order_clause = _SORT_ORDERS.get(sort_by, _SORT_ORDERS["price-low"])
    return query.order_by(*order_clause).all()


def get_field(db: Session, field_id: int) -> Optional[Field]:
    return db.query(Field).filter(Field.id_field == field_id).first()


def lock_field(db: Session, field_id: int) -> Optional[Field]:
    """Load a field with a row lock held until the transaction ends.

    Concurrent bookings of the same field serialize on this lock, which keeps
    the overlap check and the insert atomic. SQLite ignores ``FOR UPDATE``.
    """

    return (
        db.query(Field)
        .filter(Field.id_field == field_id)
        .with_for_update(of=Field)
        .first()
    )


def create_field(db: Session, field: Field) -> Field:
    db.add(field)
    db.flush()
    return field


def delete_field(db: Session, field: Field) -> None:
    db.delete(field)


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id_user == user_id).first()
