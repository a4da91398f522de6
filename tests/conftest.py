# tests/conftest.py
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Import models so Base.metadata is populated for create_all.
import calendar_optimizer.models  # noqa: F401
from calendar_optimizer.database import Base
from calendar_optimizer.models.booking import Booking, BookingStatus, LocationType
from calendar_optimizer.models.client import ClientProfile

COACH_ID = "coach-1"
SCENARIO_DATE = date(2025, 6, 1)  # a Sunday


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 5, 30, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_booking(db) -> Callable[..., Booking]:
    def _make_booking(
        start: time,
        end: time,
        *,
        booking_date: date = SCENARIO_DATE,
        coach_id: str = COACH_ID,
        client_id: str = "client-1",
        status: BookingStatus = BookingStatus.CONFIRMED,
        duration_minutes: Optional[int] = None,
        location_type: str = LocationType.IN_PERSON.value,
    ) -> Booking:
        if duration_minutes is None:
            duration_minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
        booking = Booking(
            coach_id=coach_id,
            client_id=client_id,
            booking_date=booking_date,
            start_time=start,
            end_time=end,
            duration_minutes=duration_minutes,
            status=status.value,
            location_type=location_type,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make_booking


@pytest.fixture
def make_client(db) -> Callable[..., ClientProfile]:
    def _make_client(user_id: str, first_name: Optional[str]) -> ClientProfile:
        profile = ClientProfile(user_id=user_id, first_name=first_name)
        db.add(profile)
        db.commit()
        return profile

    return _make_client
