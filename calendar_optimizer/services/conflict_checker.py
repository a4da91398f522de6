# calendar_optimizer/services/conflict_checker.py
"""
Availability checks for proposed booking slots.

Calendar optimization treats availability as an oracle: any object with an
``is_available`` method matching SlotAvailabilityChecker can be injected.
BookingConflictChecker is the default, backed by the booking store: a slot is
available when no confirmed or completed booking of the coach overlaps it.
"""

from datetime import date, time
import logging
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.orm import Session

from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class SlotAvailabilityChecker(Protocol):
    def is_available(
        self,
        coach_id: str,
        check_date: date,
        start_time: time,
        end_time: time,
        location_type: Optional[str] = None,
        *,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        ...


class BookingConflictChecker(BaseService):
    """Overlap check against the coach's existing bookings."""

    def __init__(self, db: Session, repository: Optional[BookingRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional BookingRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        coach_id: str,
        check_date: date,
        start_time: time,
        end_time: time,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Check if a time range conflicts with existing bookings.

        Args:
            coach_id: The coach to check
            check_date: The date to check
            start_time: Start time of the range to check
            end_time: End time of the range to check
            exclude_booking_id: Optional booking ID to exclude from check

        Returns:
            List of conflicts with booking details
        """
        bookings = self.repository.get_bookings_for_conflict_check(coach_id, check_date, exclude_booking_id)

        conflicts = [
            {
                "booking_id": booking.id,
                "start_time": booking.start_time.isoformat(),
                "end_time": booking.end_time.isoformat(),
                "client_id": booking.client_id,
                "status": booking.status,
            }
            for booking in bookings
            if start_time < booking.end_time and end_time > booking.start_time
        ]

        if conflicts:
            self.logger.debug(
                f"Found {len(conflicts)} booking conflicts for {coach_id} "
                f"on {check_date} between {start_time}-{end_time}"
            )

        return conflicts

    def is_available(
        self,
        coach_id: str,
        check_date: date,
        start_time: time,
        end_time: time,
        location_type: Optional[str] = None,
        *,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """
        Whether the coach is free for the given slot.

        ``location_type`` is accepted for oracle compatibility; overlap is
        location-independent for a single coach.
        """
        if end_time <= start_time:
            return False
        return not self.check_booking_conflicts(
            coach_id, check_date, start_time, end_time, exclude_booking_id
        )
