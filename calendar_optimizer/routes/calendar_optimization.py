# calendar_optimizer/routes/calendar_optimization.py
"""
API routes for calendar optimization.

Gap analysis for a coach's day, suggestion generation for a week, and the
accept/reject/apply actions on individual suggestions.
"""

from datetime import date
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..core.exceptions import DomainException
from ..database import get_db
from ..models.optimization_suggestion import SuggestionAction
from ..schemas.calendar_optimization import (
    ApplySuggestionResult,
    CalendarAnalysisSummary,
    GapAnalysis,
    GenerateSuggestionsResponse,
    SuggestionCountResponse,
    SuggestionResponse,
)
from ..services.calendar_optimization_service import CalendarOptimizationService
from ..services.optimization_suggestion_service import OptimizationSuggestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar-optimization", tags=["calendar-optimization"])


def get_calendar_optimization_service(db: Session = Depends(get_db)) -> CalendarOptimizationService:
    """Dependency to get calendar optimization service."""
    return CalendarOptimizationService(db)


def get_suggestion_service(db: Session = Depends(get_db)) -> OptimizationSuggestionService:
    """Dependency to get optimization suggestion service."""
    return OptimizationSuggestionService(db)


@router.get("/coaches/{coach_id}/gaps", response_model=List[GapAnalysis])
def detect_gaps(
    coach_id: str,
    target_date: date = Query(..., alias="date"),
    min_gap_minutes: Optional[int] = Query(None, ge=1),
    service: CalendarOptimizationService = Depends(get_calendar_optimization_service),
) -> List[GapAnalysis]:
    """Idle windows between a coach's confirmed bookings on one date."""
    return service.detect_gaps(coach_id, target_date, min_gap_minutes)


@router.get("/coaches/{coach_id}/summary", response_model=CalendarAnalysisSummary)
def analyze_calendar(
    coach_id: str,
    target_date: date = Query(..., alias="date"),
    service: CalendarOptimizationService = Depends(get_calendar_optimization_service),
) -> CalendarAnalysisSummary:
    return service.analyze_calendar(coach_id, target_date)


@router.post("/coaches/{coach_id}/suggestions/generate", response_model=GenerateSuggestionsResponse)
def generate_suggestions(
    coach_id: str,
    week_start: date = Query(...),
    service: OptimizationSuggestionService = Depends(get_suggestion_service),
) -> GenerateSuggestionsResponse:
    """Analyze the week starting at ``week_start`` and store the best suggestions."""
    try:
        count = service.generate_weekly_suggestions(coach_id, week_start)
    except DomainException as e:
        logger.error(f"Error generating optimizations for {coach_id}: {e.message}")
        raise e.to_http_exception()
    return GenerateSuggestionsResponse(suggestions_count=count)


@router.get("/coaches/{coach_id}/suggestions", response_model=List[SuggestionResponse])
def get_pending_suggestions(
    coach_id: str,
    service: OptimizationSuggestionService = Depends(get_suggestion_service),
) -> List[SuggestionResponse]:
    return [
        SuggestionResponse.model_validate(suggestion)
        for suggestion in service.get_pending_suggestions(coach_id)
    ]


@router.get("/coaches/{coach_id}/suggestions/count", response_model=SuggestionCountResponse)
def get_suggestion_count(
    coach_id: str,
    service: OptimizationSuggestionService = Depends(get_suggestion_service),
) -> SuggestionCountResponse:
    return SuggestionCountResponse(count=service.get_pending_count(coach_id))


def _respond(
    service: OptimizationSuggestionService, suggestion_id: str, action: SuggestionAction
) -> SuggestionResponse:
    try:
        suggestion = service.respond_to_suggestion(suggestion_id, action)
    except DomainException as e:
        raise e.to_http_exception()
    return SuggestionResponse.model_validate(suggestion)


@router.post("/suggestions/{suggestion_id}/accept", response_model=SuggestionResponse)
def accept_suggestion(
    suggestion_id: str,
    service: OptimizationSuggestionService = Depends(get_suggestion_service),
) -> SuggestionResponse:
    return _respond(service, suggestion_id, SuggestionAction.ACCEPT)


@router.post("/suggestions/{suggestion_id}/reject", response_model=SuggestionResponse)
def reject_suggestion(
    suggestion_id: str,
    service: OptimizationSuggestionService = Depends(get_suggestion_service),
) -> SuggestionResponse:
    return _respond(service, suggestion_id, SuggestionAction.REJECT)


@router.post("/suggestions/{suggestion_id}/apply", response_model=ApplySuggestionResult)
def apply_suggestion(
    suggestion_id: str,
    service: OptimizationSuggestionService = Depends(get_suggestion_service),
) -> ApplySuggestionResult:
    """
    Reschedule the booking behind an accepted suggestion.

    Business failures (not accepted, slot taken) come back as
    ``success: false`` with an error code; only a missing suggestion is a 404.
    """
    result = service.apply_suggestion(suggestion_id)
    if not result.success and result.code == "SUGGESTION_NOT_FOUND":
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": result.error, "code": result.code},
        )
    return result
