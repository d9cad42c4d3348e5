"""SQLAlchemy model for platform users."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from meydancha.core.database import Base, IdentifierType

ROLE_PLAYER = "player"
ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"


class User(Base):
    """A player, field owner or administrator."""

    __tablename__ = "users"

    id_user = Column(IdentifierType, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_PLAYER)
    status = Column(String(30), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User(id_user={self.id_user}, role={self.role})>"
