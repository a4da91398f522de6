# calendar_optimizer/schemas/calendar_optimization.py
"""
Schemas for gap analysis, optimization opportunities and suggestions.
"""

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import Field

from ..models.optimization_suggestion import SuggestionStatus, SuggestionType
from .base import StandardizedModel, StrictModel


class BookingBoundary(StrictModel):
    """The booking on one side of a gap."""

    id: str
    client_name: str
    boundary_time: time


class GapAnalysis(StrictModel):
    """An idle window between two consecutive confirmed bookings."""

    date: date
    start_time: time
    end_time: time
    duration_minutes: int = Field(ge=0)
    booking_before: BookingBoundary
    booking_after: BookingBoundary


class CalendarAnalysisSummary(StrictModel):
    gaps: List[GapAnalysis]
    total_gap_minutes: int
    potential_optimizations: int


class GapDetails(StrictModel):
    original_date: date
    original_start_time: time
    original_end_time: time
    gap_before_minutes: int = 0
    gap_after_minutes: int
    freed_minutes: int
    new_block_size: int


class OptimizationOpportunity(StrictModel):
    """A proposed single-booking move, not yet persisted."""

    source_booking_id: str
    coach_id: str
    client_id: str
    client_name: str
    location_type: Optional[str] = None
    proposed_date: date
    proposed_start_time: time
    proposed_end_time: time
    suggestion_type: SuggestionType
    gap_details: GapDetails
    reason_short: str
    reason_detailed: str
    benefit_score: int = Field(ge=0, le=100)
    client_preference_score: int = Field(ge=0, le=100)


class SuggestionResponse(StandardizedModel):
    id: str
    coach_id: str
    client_id: str
    source_booking_id: str
    suggestion_type: SuggestionType
    proposed_date: date
    proposed_start_time: time
    proposed_end_time: time
    location_type: Optional[str] = None
    gap_details: dict
    reason_short: str
    reason_detailed: str
    benefit_score: int
    client_preference_score: int
    status: SuggestionStatus
    expires_at: datetime
    reviewed_at: Optional[datetime] = None
    applied_at: Optional[datetime] = None


class ApplySuggestionResult(StrictModel):
    success: bool
    error: Optional[str] = None
    code: Optional[str] = None


class GenerateSuggestionsResponse(StrictModel):
    suggestions_count: int


class SuggestionCountResponse(StrictModel):
    count: int
