# calendar_optimizer/services/optimization_suggestion_service.py
"""
Optimization Suggestion Service

Owns the suggestion lifecycle:

    pending --accept--> accepted --apply--> applied
       |                    |
       |                    +--slot taken at apply--> expired
       +--reject--> rejected
       +--expiry sweep--> expired

Apply is the only operation that touches booking data. It re-checks
availability of the stored slot right before the write; nothing is locked
between scoring and apply, so a stale slot is detected here, not prevented.
"""

from datetime import date, datetime, timedelta
import logging
from typing import Callable, List, Optional, Sequence, Union

from sqlalchemy.orm import Session

from ..core.config import Settings, settings
from ..core.exceptions import (
    BusinessRuleException,
    DomainException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    SlotNoLongerAvailableException,
    SuggestionNotFoundException,
    SuggestionStateException,
)
from ..models.booking import BookingStatus
from ..models.optimization_suggestion import (
    CalendarOptimizationSuggestion,
    SuggestionAction,
    SuggestionStatus,
)
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..repositories.suggestion_repository import SuggestionRepository
from ..schemas.calendar_optimization import ApplySuggestionResult, OptimizationOpportunity
from ..utils.time_utils import as_utc, utc_now
from .base import BaseService
from .calendar_optimization_service import CalendarOptimizationService
from .conflict_checker import BookingConflictChecker, SlotAvailabilityChecker

logger = logging.getLogger(__name__)

APPLY_FAILED = "APPLY_FAILED"


class OptimizationSuggestionService(BaseService):
    """Persists opportunities as suggestions and drives their lifecycle."""

    def __init__(
        self,
        db: Session,
        suggestion_repository: Optional[SuggestionRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        availability_checker: Optional[SlotAvailabilityChecker] = None,
        optimization_service: Optional[CalendarOptimizationService] = None,
        config: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(db)
        self.settings = config or settings
        self.clock = clock
        self.suggestion_repository = (
            suggestion_repository or RepositoryFactory.create_suggestion_repository(db)
        )
        self.booking_repository = booking_repository or RepositoryFactory.create_booking_repository(db)
        self.availability_checker = availability_checker or BookingConflictChecker(
            db, self.booking_repository
        )
        self.optimization_service = optimization_service or CalendarOptimizationService(
            db,
            booking_repository=self.booking_repository,
            availability_checker=self.availability_checker,
            config=self.settings,
        )

    @BaseService.measure_operation("create_suggestions")
    def create_suggestions(
        self, coach_id: str, opportunities: Sequence[OptimizationOpportunity]
    ) -> List[CalendarOptimizationSuggestion]:
        """
        Persist opportunities as pending suggestions.

        Every suggestion in the batch expires ``suggestion_expiration_days``
        from now.

        Raises:
            ServiceException: If the batch could not be stored
        """
        if not opportunities:
            return []

        expires_at = self.clock() + timedelta(days=self.settings.suggestion_expiration_days)
        rows = [
            {
                "coach_id": coach_id,
                "client_id": opportunity.client_id,
                "source_booking_id": opportunity.source_booking_id,
                "suggestion_type": opportunity.suggestion_type,
                "proposed_date": opportunity.proposed_date,
                "proposed_start_time": opportunity.proposed_start_time,
                "proposed_end_time": opportunity.proposed_end_time,
                "location_type": opportunity.location_type,
                "gap_details": opportunity.gap_details.model_dump(mode="json"),
                "reason_short": opportunity.reason_short,
                "reason_detailed": opportunity.reason_detailed,
                "benefit_score": opportunity.benefit_score,
                "client_preference_score": opportunity.client_preference_score,
                "status": SuggestionStatus.PENDING.value,
                "expires_at": expires_at,
            }
            for opportunity in opportunities
        ]

        try:
            with self.transaction():
                suggestions = self.suggestion_repository.bulk_create(rows)
        except RepositoryException as e:
            raise ServiceException(
                "Failed to create optimization suggestions", details={"coach_id": coach_id}
            ) from e

        prometheus_metrics.record_suggestion_transition(SuggestionStatus.PENDING.value, len(suggestions))
        self.log_operation("create_suggestions", coach_id=coach_id, count=len(suggestions))
        return suggestions

    @BaseService.measure_operation("get_pending_suggestions")
    def get_pending_suggestions(self, coach_id: str) -> List[CalendarOptimizationSuggestion]:
        """Non-expired pending suggestions for a coach, highest benefit first."""
        try:
            return self.suggestion_repository.get_pending_for_coach(coach_id, self.clock())
        except RepositoryException as e:
            self.logger.error(f"Error fetching pending suggestions for {coach_id}: {e}")
            return []

    def get_pending_count(self, coach_id: str) -> int:
        try:
            return self.suggestion_repository.count_pending_for_coach(coach_id, self.clock())
        except RepositoryException as e:
            self.logger.error(f"Error counting pending suggestions for {coach_id}: {e}")
            return 0

    def get_suggestion_history(
        self, coach_id: str, statuses: Optional[Sequence[SuggestionStatus]] = None
    ) -> List[CalendarOptimizationSuggestion]:
        """All suggestions for a coach regardless of status, newest first."""
        try:
            return self.suggestion_repository.get_for_coach(coach_id, statuses)
        except RepositoryException as e:
            self.logger.error(f"Error fetching suggestion history for {coach_id}: {e}")
            return []

    @BaseService.measure_operation("respond_to_suggestion")
    def respond_to_suggestion(
        self, suggestion_id: str, response: Union[SuggestionAction, str]
    ) -> CalendarOptimizationSuggestion:
        """
        Accept or reject a pending suggestion.

        Raises:
            ValueError: If response is neither accept nor reject
            SuggestionNotFoundException: If the suggestion does not exist
            SuggestionStateException: If the suggestion is no longer pending or
                its expiry has passed
        """
        action = SuggestionAction(response)
        suggestion = self._get_suggestion(suggestion_id)

        if suggestion.status != SuggestionStatus.PENDING.value:
            raise SuggestionStateException(
                f"Suggestion is already {suggestion.status}",
                suggestion_id=suggestion_id,
                current_status=suggestion.status,
                required_status=SuggestionStatus.PENDING.value,
            )

        if as_utc(suggestion.expires_at) <= as_utc(self.clock()):
            raise SuggestionStateException(
                "Suggestion has expired",
                suggestion_id=suggestion_id,
                current_status=SuggestionStatus.EXPIRED.value,
                required_status=SuggestionStatus.PENDING.value,
            )

        new_status = (
            SuggestionStatus.ACCEPTED if action == SuggestionAction.ACCEPT else SuggestionStatus.REJECTED
        )
        with self.transaction():
            suggestion = self.suggestion_repository.update(
                suggestion_id, status=new_status.value, reviewed_at=self.clock()
            )

        prometheus_metrics.record_suggestion_transition(new_status.value)
        self.logger.info(f"Suggestion {suggestion_id} {new_status.value}")
        return suggestion

    @BaseService.measure_operation("apply_suggestion")
    def apply_suggestion(self, suggestion_id: str) -> ApplySuggestionResult:
        """
        Reschedule the source booking of an accepted suggestion.

        The stored slot is re-checked first. If it was taken in the meantime
        the suggestion becomes expired and the booking is left untouched.

        Returns:
            ApplySuggestionResult with success flag, or error message and code
        """
        try:
            self._apply(suggestion_id)
        except DomainException as e:
            self.logger.warning(f"Could not apply suggestion {suggestion_id}: {e.message}")
            return ApplySuggestionResult(success=False, error=e.message, code=e.code)
        except RepositoryException as e:
            self.logger.error(f"Store failure applying suggestion {suggestion_id}: {e}")
            return ApplySuggestionResult(
                success=False, error="Failed to reschedule booking", code=APPLY_FAILED
            )

        return ApplySuggestionResult(success=True)

    def _apply(self, suggestion_id: str) -> None:
        suggestion = self._get_suggestion(suggestion_id)

        if suggestion.status != SuggestionStatus.ACCEPTED.value:
            raise SuggestionStateException(
                "Suggestion must be accepted first",
                suggestion_id=suggestion_id,
                current_status=suggestion.status,
                required_status=SuggestionStatus.ACCEPTED.value,
            )

        booking = self.booking_repository.get_by_id(suggestion.source_booking_id)
        if booking is None:
            raise NotFoundException(
                "Source booking not found",
                code="BOOKING_NOT_FOUND",
                details={"booking_id": suggestion.source_booking_id},
            )
        if booking.status != BookingStatus.CONFIRMED.value:
            raise BusinessRuleException(
                f"Source booking is {booking.status}",
                code="BOOKING_NOT_CONFIRMED",
                details={"booking_id": booking.id, "status": booking.status},
            )

        try:
            available = self.availability_checker.is_available(
                suggestion.coach_id,
                suggestion.proposed_date,
                suggestion.proposed_start_time,
                suggestion.proposed_end_time,
                suggestion.location_type,
                exclude_booking_id=suggestion.source_booking_id,
            )
        except Exception as e:
            raise ServiceException(
                "Failed to reschedule booking",
                code=APPLY_FAILED,
                details={"suggestion_id": suggestion_id, "reason": str(e)},
            ) from e

        if not available:
            with self.transaction():
                self.suggestion_repository.update(suggestion_id, status=SuggestionStatus.EXPIRED.value)
            prometheus_metrics.record_suggestion_transition(SuggestionStatus.EXPIRED.value)
            raise SlotNoLongerAvailableException(
                suggestion_id,
                details={
                    "proposed_date": suggestion.proposed_date.isoformat(),
                    "proposed_start_time": suggestion.proposed_start_time.isoformat(),
                    "proposed_end_time": suggestion.proposed_end_time.isoformat(),
                },
            )

        # Booking move and status change commit together
        with self.transaction():
            self.booking_repository.reschedule(
                suggestion.source_booking_id,
                suggestion.proposed_date,
                suggestion.proposed_start_time,
                suggestion.proposed_end_time,
            )
            self.suggestion_repository.update(
                suggestion_id, status=SuggestionStatus.APPLIED.value, applied_at=self.clock()
            )

        prometheus_metrics.record_suggestion_transition(SuggestionStatus.APPLIED.value)
        self.log_operation(
            "apply_suggestion",
            suggestion_id=suggestion_id,
            booking_id=suggestion.source_booking_id,
        )

    @BaseService.measure_operation("expire_old_suggestions")
    def expire_old_suggestions(self) -> int:
        """
        Expire every pending suggestion past its expiry timestamp.

        Idempotent: a second run finds nothing left to expire.

        Returns:
            Number of suggestions expired by this run
        """
        try:
            with self.transaction():
                count = self.suggestion_repository.expire_pending_before(self.clock())
        except RepositoryException as e:
            self.logger.error(f"Error expiring suggestions: {e}")
            return 0

        prometheus_metrics.record_suggestion_transition(SuggestionStatus.EXPIRED.value, count)
        if count:
            self.logger.info(f"Expired {count} optimization suggestions")
        return count

    @BaseService.measure_operation("generate_weekly_suggestions")
    def generate_weekly_suggestions(self, coach_id: str, week_start: date) -> int:
        """
        Analyze a seven-day window and persist the best opportunities.

        Returns:
            Number of suggestions created (at most ``max_suggestions_per_run``)
        """
        week_end = week_start + timedelta(days=6)
        opportunities = self.optimization_service.analyze_opportunities(coach_id, week_start, week_end)
        if not opportunities:
            return 0

        top = opportunities[: self.settings.max_suggestions_per_run]
        return len(self.create_suggestions(coach_id, top))

    def _get_suggestion(self, suggestion_id: str) -> CalendarOptimizationSuggestion:
        suggestion = self.suggestion_repository.get_by_id(suggestion_id)
        if suggestion is None:
            raise SuggestionNotFoundException(suggestion_id)
        return suggestion
