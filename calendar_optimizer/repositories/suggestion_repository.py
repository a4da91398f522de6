# calendar_optimizer/repositories/suggestion_repository.py
"""
Suggestion Repository

Stores calendar optimization suggestions and answers the lifecycle queries:
pending-by-coach, history-by-coach, and the expiry sweep.
"""

from datetime import datetime
import logging
from typing import List, Optional, Sequence, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.optimization_suggestion import CalendarOptimizationSuggestion, SuggestionStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SuggestionRepository(BaseRepository[CalendarOptimizationSuggestion]):
    def __init__(self, db: Session):
        super().__init__(db, CalendarOptimizationSuggestion)
        self.logger = logging.getLogger(__name__)

    def _pending_query(self, coach_id: str, now: datetime):
        return self.db.query(CalendarOptimizationSuggestion).filter(
            CalendarOptimizationSuggestion.coach_id == coach_id,
            CalendarOptimizationSuggestion.status == SuggestionStatus.PENDING.value,
            CalendarOptimizationSuggestion.expires_at > now,
        )

    def get_pending_for_coach(self, coach_id: str, now: datetime) -> List[CalendarOptimizationSuggestion]:
        """Non-expired pending suggestions, highest benefit score first."""
        try:
            return cast(
                List[CalendarOptimizationSuggestion],
                self._pending_query(coach_id, now)
                .order_by(
                    CalendarOptimizationSuggestion.benefit_score.desc(),
                    CalendarOptimizationSuggestion.id,
                )
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching pending suggestions for {coach_id}: {str(e)}")
            raise RepositoryException(f"Failed to fetch suggestions: {str(e)}")

    def count_pending_for_coach(self, coach_id: str, now: datetime) -> int:
        try:
            return self._pending_query(coach_id, now).count()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting pending suggestions for {coach_id}: {str(e)}")
            raise RepositoryException(f"Failed to count suggestions: {str(e)}")

    def get_for_coach(
        self, coach_id: str, statuses: Optional[Sequence[SuggestionStatus]] = None
    ) -> List[CalendarOptimizationSuggestion]:
        """All suggestions for a coach, newest first, optionally filtered by status."""
        try:
            query = self.db.query(CalendarOptimizationSuggestion).filter(
                CalendarOptimizationSuggestion.coach_id == coach_id
            )
            if statuses:
                query = query.filter(
                    CalendarOptimizationSuggestion.status.in_([s.value for s in statuses])
                )
            # ULIDs sort by creation time
            return cast(
                List[CalendarOptimizationSuggestion],
                query.order_by(CalendarOptimizationSuggestion.id.desc()).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching suggestion history for {coach_id}: {str(e)}")
            raise RepositoryException(f"Failed to fetch suggestion history: {str(e)}")

    def expire_pending_before(self, now: datetime) -> int:
        """
        Mark every pending suggestion whose expiry has passed as expired.

        Returns:
            Number of suggestions transitioned
        """
        try:
            count = (
                self.db.query(CalendarOptimizationSuggestion)
                .filter(
                    CalendarOptimizationSuggestion.status == SuggestionStatus.PENDING.value,
                    CalendarOptimizationSuggestion.expires_at < now,
                )
                .update(
                    {
                        CalendarOptimizationSuggestion.status: SuggestionStatus.EXPIRED.value,
                        CalendarOptimizationSuggestion.updated_at: now,
                    },
                    synchronize_session="fetch",
                )
            )
            self.db.flush()
            return int(count or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error expiring suggestions: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to expire suggestions: {str(e)}")
