from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import relationship

from meydancha.core.database import Base, IdentifierType

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"


class Booking(Base):
    """One field reserved for a contiguous range of one calendar day."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_bookings_time_range"),
        Index("ix_bookings_field_date", "id_field", "date"),
    )

    id_booking = Column(IdentifierType, primary_key=True, index=True)
    id_field = Column(
        IdentifierType,
        ForeignKey("fields.id_field", ondelete="CASCADE"),
        nullable=False,
    )
    id_user = Column(IdentifierType, ForeignKey("users.id_user"), nullable=False)
    date = Column(Date, nullable=False)
    # "HH:MM" strings; zero padding keeps lexical and chronological order equal
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(30), nullable=False, default=BOOKING_CONFIRMED)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    field = relationship("Field", back_populates="bookings")
    user = relationship("User", lazy="joined")

    def __repr__(self) -> str:
        return (
            f"<Booking(id_booking={self.id_booking}, id_field={self.id_field}, "
            f"date={self.date}, start_time={self.start_time}, end_time={self.end_time}, "
            f"status={self.status})>"
        )
