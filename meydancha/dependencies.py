"""Shared dependencies for the reservation service."""

from datetime import datetime, timezone
from typing import Generator

from meydancha.core.database import SessionLocal


def get_db() -> Generator:
    """Provide a transactional scope around a series of operations."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_now() -> datetime:
    """Current instant as an aware UTC datetime.

    Overridden in tests to pin the clock.
    """

    return datetime.now(timezone.utc)
