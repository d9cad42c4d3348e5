from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from meydancha.core.database import Base, IdentifierType


class Review(Base):
    """A player's rating of a field they have booked."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("id_field", "id_user", name="uq_reviews_field_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),
    )

    id_review = Column(IdentifierType, primary_key=True, index=True)
    id_field = Column(
        IdentifierType,
        ForeignKey("fields.id_field", ondelete="CASCADE"),
        nullable=False,
    )
    id_user = Column(IdentifierType, ForeignKey("users.id_user"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    field = relationship("Field", back_populates="reviews")
    user = relationship("User", lazy="joined")
