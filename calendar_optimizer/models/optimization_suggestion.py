# calendar_optimizer/models/optimization_suggestion.py
"""
Calendar optimization suggestion model.

A suggestion is the persisted form of an optimization opportunity:
a proposal to move one booking into the gap before it.

Lifecycle:
    pending -> accepted | rejected
    accepted -> applied | expired
    pending -> expired (sweep, once expires_at has passed)
"""

from enum import Enum

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text, Time
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class SuggestionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    APPLIED = "applied"
    EXPIRED = "expired"


class SuggestionType(str, Enum):
    CONSOLIDATE_GAP = "consolidate_gap"  # resulting free block < 60 min
    CREATE_BLOCK = "create_block"


class SuggestionAction(str, Enum):
    """A coach's answer to a pending suggestion."""

    ACCEPT = "accept"
    REJECT = "reject"


class CalendarOptimizationSuggestion(Base):
    __tablename__ = "calendar_optimization_suggestions"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    coach_id = Column(String(26), nullable=False, index=True)
    client_id = Column(String(26), nullable=False)
    source_booking_id = Column(String(26), ForeignKey("bookings.id"), nullable=False)
    suggestion_type = Column(String(30), nullable=False)

    proposed_date = Column(Date, nullable=False)
    proposed_start_time = Column(Time, nullable=False)
    proposed_end_time = Column(Time, nullable=False)
    location_type = Column(String(50), nullable=True)

    gap_details = Column(JSON, nullable=False, default=dict)
    reason_short = Column(String(255), nullable=False)
    reason_detailed = Column(Text, nullable=False)

    # Denormalized so pending lists sort without recomputation
    benefit_score = Column(Integer, nullable=False)
    client_preference_score = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default=SuggestionStatus.PENDING.value, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    applied_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    source_booking = relationship("Booking")

    __table_args__ = (
        Index("ix_cos_coach_status_expires", "coach_id", "status", "expires_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<CalendarOptimizationSuggestion {self.id} booking={self.source_booking_id} "
            f"{self.status} score={self.benefit_score}>"
        )
