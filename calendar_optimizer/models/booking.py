# calendar_optimizer/models/booking.py
"""
Booking model.

Bookings are self-contained records storing coach, client, date and time
directly. Calendar optimization only reads confirmed and completed bookings,
and on apply rewrites the date/time of a single booking.
"""

from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Index, Integer, String, Time
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class LocationType(str, Enum):
    """Where the session takes place."""

    IN_PERSON = "in_person"
    ONLINE = "online"


class Booking(Base):
    """A single scheduled session between a coach and a client."""

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    coach_id = Column(String(26), nullable=False, index=True)
    client_id = Column(String(26), nullable=False, index=True)

    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True)
    location_type = Column(String(50), nullable=True, default=LocationType.IN_PERSON.value)

    # Set when calendar optimization moved the booking
    rescheduled_by_system = Column(Boolean, nullable=False, default=False)
    optimization_accepted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_bookings_time_order"),
        CheckConstraint("duration_minutes > 0", name="ck_bookings_positive_duration"),
        Index("ix_bookings_coach_date_status", "coach_id", "booking_date", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id} coach={self.coach_id} "
            f"{self.booking_date} {self.start_time}-{self.end_time} {self.status}>"
        )
