# calendar_optimizer/services/calendar_optimization_service.py
"""
Calendar Optimization Service

Finds idle gaps in a coach's calendar and proposes single-booking moves
that consolidate them:
- Gap detection between consecutive confirmed bookings of one day
- Client preference scoring from completed booking history
- Opportunity analysis over a date range, ranked by benefit score

Every operation here is read-only. Data-access failures degrade to empty
results because the output is advisory.
"""

from datetime import date, timedelta
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.config import Settings, settings
from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..repositories.client_repository import ClientRepository
from ..schemas.calendar_optimization import (
    BookingBoundary,
    CalendarAnalysisSummary,
    GapAnalysis,
    GapDetails,
    OptimizationOpportunity,
)
from ..utils.time_utils import (
    MINUTES_PER_DAY,
    TimeLike,
    format_hhmm,
    minutes_to_time,
    time_to_minutes,
)
from .base import BaseService
from .conflict_checker import BookingConflictChecker, SlotAvailabilityChecker
from .scoring import (
    calculate_benefit_score,
    calculate_new_block_size,
    calculate_preference_score,
    classify_suggestion_type,
)

logger = logging.getLogger(__name__)


class CalendarOptimizationService(BaseService):
    """
    Gap detection and opportunity analysis for a coach's calendar.

    Collaborators are injected so each piece can be exercised without a live
    store; defaults are built from the session.
    """

    def __init__(
        self,
        db: Session,
        booking_repository: Optional[BookingRepository] = None,
        client_repository: Optional[ClientRepository] = None,
        availability_checker: Optional[SlotAvailabilityChecker] = None,
        config: Optional[Settings] = None,
    ):
        """
        Initialize calendar optimization service.

        Args:
            db: Database session
            booking_repository: Optional booking store
            client_repository: Optional client directory
            availability_checker: Optional availability oracle
            config: Optional settings override
        """
        super().__init__(db)
        self.settings = config or settings
        self.booking_repository = booking_repository or RepositoryFactory.create_booking_repository(db)
        self.client_repository = client_repository or RepositoryFactory.create_client_repository(db)
        self.availability_checker = availability_checker or BookingConflictChecker(
            db, self.booking_repository
        )

    # Gap detection

    @BaseService.measure_operation("detect_gaps")
    def detect_gaps(
        self,
        coach_id: str,
        target_date: date,
        min_gap_minutes: Optional[int] = None,
    ) -> List[GapAnalysis]:
        """
        Detect idle windows between consecutive confirmed bookings on one date.

        No gap is reported before the first or after the last booking, so
        fewer than two bookings yields an empty list.

        Args:
            coach_id: The coach
            target_date: The date to inspect
            min_gap_minutes: Smallest gap to report (defaults to settings)

        Returns:
            Gaps in chronological order
        """
        min_gap = self.settings.min_gap_minutes if min_gap_minutes is None else min_gap_minutes

        try:
            bookings = self.booking_repository.get_confirmed_bookings_for_date(coach_id, target_date)
        except RepositoryException as e:
            self.logger.error(f"Error fetching bookings for gap detection ({coach_id}, {target_date}): {e}")
            return []

        if len(bookings) < 2:
            return []

        client_names = self._resolve_client_names(b.client_id for b in bookings)

        gaps: List[GapAnalysis] = []
        for current, following in zip(bookings, bookings[1:]):
            gap_minutes = self._gap_minutes(current, following)
            if gap_minutes < min_gap:
                continue

            gaps.append(
                GapAnalysis(
                    date=target_date,
                    start_time=current.end_time,
                    end_time=following.start_time,
                    duration_minutes=gap_minutes,
                    booking_before=BookingBoundary(
                        id=current.id,
                        client_name=self._client_name(client_names, current.client_id),
                        boundary_time=current.end_time,
                    ),
                    booking_after=BookingBoundary(
                        id=following.id,
                        client_name=self._client_name(client_names, following.client_id),
                        boundary_time=following.start_time,
                    ),
                )
            )

        return gaps

    def analyze_calendar(self, coach_id: str, target_date: date) -> CalendarAnalysisSummary:
        """Summarize a day's gaps and how many are small enough to consolidate."""
        gaps = self.detect_gaps(coach_id, target_date)
        return CalendarAnalysisSummary(
            gaps=gaps,
            total_gap_minutes=sum(gap.duration_minutes for gap in gaps),
            potential_optimizations=sum(
                1 for gap in gaps if gap.duration_minutes <= self.settings.max_consolidation_gap_minutes
            ),
        )

    # Preference scoring

    @BaseService.measure_operation("get_client_preference_score")
    def get_client_preference_score(
        self,
        client_id: str,
        coach_id: str,
        day_of_week: int,
        start_time: TimeLike,
    ) -> int:
        """
        Score how well a candidate weekday/start time matches a client's habits.

        Uses the client's most recent completed bookings with this coach.

        Raises:
            RepositoryException: If the history cannot be read
        """
        history = self.booking_repository.get_client_history(
            client_id, coach_id, limit=self.settings.preference_history_limit
        )
        return calculate_preference_score(
            [(booking.booking_date, booking.start_time) for booking in history],
            day_of_week,
            start_time,
        )

    # Opportunity analysis

    @BaseService.measure_operation("analyze_opportunities")
    def analyze_opportunities(
        self, coach_id: str, start_date: date, end_date: date
    ) -> List[OptimizationOpportunity]:
        """
        Find bookings that could move earlier to close a gap.

        Days are analyzed independently; a day whose bookings cannot be read
        is skipped.

        Args:
            coach_id: The coach
            start_date: First date of the range (inclusive)
            end_date: Last date of the range (inclusive)

        Returns:
            Opportunities sorted by benefit score, highest first; ties keep
            chronological discovery order
        """
        opportunities: List[OptimizationOpportunity] = []

        current = start_date
        while current <= end_date:
            opportunities.extend(self._analyze_day(coach_id, current))
            current += timedelta(days=1)

        self.logger.info(
            f"Found {len(opportunities)} optimization opportunities for {coach_id} "
            f"between {start_date} and {end_date}"
        )

        return sorted(opportunities, key=lambda o: o.benefit_score, reverse=True)

    def _analyze_day(self, coach_id: str, target_date: date) -> List[OptimizationOpportunity]:
        try:
            bookings = self.booking_repository.get_confirmed_bookings_for_date(coach_id, target_date)
        except RepositoryException as e:
            self.logger.warning(f"Skipping {target_date} for {coach_id}: {e}")
            return []

        if len(bookings) < 2:
            return []

        client_names = self._resolve_client_names(b.client_id for b in bookings)

        found: List[OptimizationOpportunity] = []
        for index in range(len(bookings) - 1):
            following = bookings[index + 2] if index + 2 < len(bookings) else None
            opportunity = self._evaluate_move(
                coach_id,
                target_date,
                earlier=bookings[index],
                later=bookings[index + 1],
                following=following,
                booking_count=len(bookings),
                client_names=client_names,
            )
            if opportunity is not None:
                found.append(opportunity)

        return found

    def _evaluate_move(
        self,
        coach_id: str,
        target_date: date,
        *,
        earlier: Booking,
        later: Booking,
        following: Optional[Booking],
        booking_count: int,
        client_names: Dict[str, str],
    ) -> Optional[OptimizationOpportunity]:
        """Propose moving ``later`` to start when ``earlier`` ends, if worthwhile."""
        gap_minutes = self._gap_minutes(earlier, later)
        if not self.settings.min_gap_minutes <= gap_minutes <= self.settings.max_consolidation_gap_minutes:
            return None

        duration = later.duration_minutes or (
            time_to_minutes(later.end_time) - time_to_minutes(later.start_time)
        )
        proposed_start_minutes = time_to_minutes(earlier.end_time)
        proposed_end_minutes = proposed_start_minutes + duration
        if proposed_end_minutes >= MINUTES_PER_DAY:
            return None

        proposed_start = minutes_to_time(proposed_start_minutes)
        proposed_end = minutes_to_time(proposed_end_minutes)

        try:
            available = self.availability_checker.is_available(
                coach_id,
                target_date,
                proposed_start,
                proposed_end,
                later.location_type,
                exclude_booking_id=later.id,
            )
        except Exception as e:
            self.logger.warning(f"Availability check failed for booking {later.id}: {e}")
            return None

        if not available:
            return None

        try:
            preference_score = self.get_client_preference_score(
                later.client_id, coach_id, target_date.weekday(), proposed_start
            )
        except RepositoryException as e:
            self.logger.warning(f"Preference lookup failed for client {later.client_id}: {e}")
            return None

        benefit_score = calculate_benefit_score(gap_minutes, booking_count, preference_score)
        if benefit_score < self.settings.min_benefit_score:
            self.logger.debug(f"Booking {later.id} move scored {benefit_score}, below threshold")
            return None

        new_block_size = calculate_new_block_size(
            proposed_end,
            following.start_time if following is not None else None,
            self.settings.day_end_time,
        )
        client_name = self._client_name(client_names, later.client_id)

        return OptimizationOpportunity(
            source_booking_id=later.id,
            coach_id=coach_id,
            client_id=later.client_id,
            client_name=client_name,
            location_type=later.location_type,
            proposed_date=target_date,
            proposed_start_time=proposed_start,
            proposed_end_time=proposed_end,
            suggestion_type=classify_suggestion_type(new_block_size),
            gap_details=GapDetails(
                original_date=target_date,
                original_start_time=later.start_time,
                original_end_time=later.end_time,
                gap_before_minutes=0,
                gap_after_minutes=gap_minutes,
                freed_minutes=gap_minutes,
                new_block_size=new_block_size,
            ),
            reason_short=f"Move to {format_hhmm(proposed_start)} to free {gap_minutes} min",
            reason_detailed=(
                f"Moving {client_name}'s session from {format_hhmm(later.start_time)} "
                f"to {format_hhmm(proposed_start)} frees a block of {gap_minutes} minutes."
            ),
            benefit_score=benefit_score,
            client_preference_score=preference_score,
        )

    # Helpers

    @staticmethod
    def _gap_minutes(current: Booking, following: Booking) -> int:
        return time_to_minutes(following.start_time) - time_to_minutes(current.end_time)

    def _resolve_client_names(self, client_ids: Iterable[str]) -> Dict[str, str]:
        try:
            return self.client_repository.get_display_names(client_ids)
        except RepositoryException as e:
            self.logger.warning(f"Client names unavailable, using placeholder: {e}")
            return {}

    def _client_name(self, client_names: Dict[str, str], client_id: str) -> str:
        return client_names.get(client_id) or self.settings.default_client_name
