import itertools
import os

# Keep the application's own engine off the filesystem during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from meydancha.core.database import Base
from meydancha.dependencies import get_db, get_now
from meydancha.main import app
from meydancha.models import Booking, Field, User

BAKU = ZoneInfo("Asia/Baku")

# Sunday afternoon on the Baku wall clock.
FIXED_NOW = datetime(2025, 6, 1, 14, 30, tzinfo=BAKU)
TODAY = date(2025, 6, 1)
TOMORROW = date(2025, 6, 2)
YESTERDAY = date(2025, 5, 31)

API_PREFIX = "/api/meydancha/v1"


class FrozenClock:
    """Mutable stand-in for the request clock."""

    def __init__(self, now: datetime):
        self.now = now


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clock():
    return FrozenClock(FIXED_NOW)


@pytest.fixture
def client(db_session, clock):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: clock.now

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = itertools.count(1)

    def _make_user(role: str = "player") -> User:
        number = next(counter)
        user = User(
            name=f"{role.title()} {number}",
            email=f"{role}{number}@meydancha.test",
            phone="+994501234567",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def player(make_user):
    return make_user("player")


@pytest.fixture
def owner(make_user):
    return make_user("owner")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def make_field(db_session, owner):
    def _make_field(**overrides) -> Field:
        data = {
            "name": "Olympic Arena",
            "sport_type": "football",
            "city": "Baku",
            "address": "28 May Street 12",
            "price_per_hour": Decimal("20.00"),
            "id_owner": owner.id_user,
        }
        data.update(overrides)
        field = Field(**data)
        db_session.add(field)
        db_session.commit()
        db_session.refresh(field)
        return field

    return _make_field


@pytest.fixture
def field(make_field):
    return make_field()


@pytest.fixture
def make_booking(db_session, player):
    def _make_booking(
        field: Field,
        start_time: str,
        end_time: str,
        *,
        booking_date: date = TODAY,
        status: str = "confirmed",
        user: User = None,
    ) -> Booking:
        booking = Booking(
            id_field=field.id_field,
            id_user=(user or player).id_user,
            date=booking_date,
            start_time=start_time,
            end_time=end_time,
            total_price=Decimal("0.00"),
            status=status,
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make_booking
