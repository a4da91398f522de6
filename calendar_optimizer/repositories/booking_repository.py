# calendar_optimizer/repositories/booking_repository.py
"""
Booking Repository

Read access to a coach's confirmed calendar and a client's completed
history, plus the single reschedule write used when a suggestion is applied.
"""

from datetime import date, time
import logging
from typing import List, Optional, Sequence, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

# Statuses that occupy a slot on the coach's calendar
OCCUPYING_STATUSES: Sequence[str] = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_confirmed_bookings_for_date(self, coach_id: str, target_date: date) -> List[Booking]:
        """
        Get a coach's confirmed bookings on one date.

        Returns:
            Bookings ordered by start time
        """
        try:
            return cast(
                List[Booking],
                self.db.query(Booking)
                .filter(
                    Booking.coach_id == coach_id,
                    Booking.booking_date == target_date,
                    Booking.status == BookingStatus.CONFIRMED.value,
                )
                .order_by(Booking.start_time)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting confirmed bookings for {coach_id} on {target_date}: {str(e)}")
            raise RepositoryException(f"Failed to get bookings: {str(e)}")

    def get_client_history(
        self,
        client_id: str,
        coach_id: str,
        *,
        status: BookingStatus = BookingStatus.COMPLETED,
        limit: int = 20,
    ) -> List[Booking]:
        """
        Get a client's most recent bookings with a coach, newest first.

        Args:
            client_id: The client
            coach_id: The coach
            status: Booking status to include
            limit: Maximum number of bookings to return
        """
        try:
            return cast(
                List[Booking],
                self.db.query(Booking)
                .filter(
                    Booking.client_id == client_id,
                    Booking.coach_id == coach_id,
                    Booking.status == status.value,
                )
                .order_by(Booking.booking_date.desc(), Booking.start_time.desc())
                .limit(limit)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting history for client {client_id}: {str(e)}")
            raise RepositoryException(f"Failed to get client history: {str(e)}")

    def get_bookings_for_conflict_check(
        self, coach_id: str, check_date: date, exclude_booking_id: Optional[str] = None
    ) -> List[Booking]:
        """
        Get bookings that occupy the coach's calendar on a date.

        Args:
            coach_id: The coach to check
            check_date: The date to check for conflicts
            exclude_booking_id: Optional booking ID to exclude from results
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.coach_id == coach_id,
                Booking.booking_date == check_date,
                Booking.status.in_(OCCUPYING_STATUSES),
            )

            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return cast(List[Booking], query.order_by(Booking.start_time).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}")

    def reschedule(
        self, booking_id: str, new_date: date, start_time: time, end_time: time
    ) -> Optional[Booking]:
        """
        Move a booking to a new slot and flag it as system-rescheduled.

        Note: Does NOT commit - the calling service owns the transaction.
        """
        return self.update(
            booking_id,
            booking_date=new_date,
            start_time=start_time,
            end_time=end_time,
            rescheduled_by_system=True,
            optimization_accepted=True,
        )
