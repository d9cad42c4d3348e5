from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from meydancha.core.database import Base, IdentifierType


class Field(Base):
    """A sports field that players can book by the hour."""

    __tablename__ = "fields"

    id_field = Column(IdentifierType, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    sport_type = Column(String(30), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    address = Column(Text, nullable=False)
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    # JSON document, see meydancha.services.working_hours
    working_hours = Column(Text, nullable=True)
    timezone = Column(String(64), nullable=True)
    rating_avg = Column(Numeric(3, 2), nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)
    id_owner = Column(IdentifierType, ForeignKey("users.id_user"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User")
    bookings = relationship("Booking", back_populates="field", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="field", cascade="all, delete-orphan")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Field(id_field={self.id_field}, name={self.name})>"
