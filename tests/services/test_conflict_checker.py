# tests/services/test_conflict_checker.py
from datetime import time, timedelta

import pytest

from calendar_optimizer.models.booking import BookingStatus
from calendar_optimizer.services.conflict_checker import BookingConflictChecker
from tests.conftest import COACH_ID, SCENARIO_DATE


@pytest.fixture
def checker(db):
    return BookingConflictChecker(db)


class TestBookingConflictChecker:
    def test_overlap_reported(self, checker, make_booking):
        booking = make_booking(time(10, 0), time(11, 0))

        conflicts = checker.check_booking_conflicts(COACH_ID, SCENARIO_DATE, time(10, 30), time(11, 30))

        assert len(conflicts) == 1
        assert conflicts[0]["booking_id"] == booking.id
        assert conflicts[0]["start_time"] == "10:00:00"

    @pytest.mark.parametrize(
        "start,end,available",
        [
            (time(9, 0), time(10, 0), True),  # ends as the booking starts
            (time(11, 0), time(12, 0), True),  # starts as the booking ends
            (time(9, 30), time(10, 1), False),
            (time(10, 15), time(10, 45), False),  # inside
            (time(9, 0), time(12, 0), False),  # around
        ],
    )
    def test_overlap_boundaries(self, checker, make_booking, start, end, available):
        make_booking(time(10, 0), time(11, 0))

        assert checker.is_available(COACH_ID, SCENARIO_DATE, start, end) is available

    def test_completed_bookings_occupy_slot(self, checker, make_booking):
        make_booking(time(10, 0), time(11, 0), status=BookingStatus.COMPLETED)

        assert checker.is_available(COACH_ID, SCENARIO_DATE, time(10, 0), time(11, 0)) is False

    def test_cancelled_bookings_free_slot(self, checker, make_booking):
        make_booking(time(10, 0), time(11, 0), status=BookingStatus.CANCELLED)
        make_booking(time(10, 0), time(11, 0), status=BookingStatus.NO_SHOW)

        assert checker.is_available(COACH_ID, SCENARIO_DATE, time(10, 0), time(11, 0)) is True

    def test_excluded_booking_ignored(self, checker, make_booking):
        booking = make_booking(time(10, 0), time(11, 0))

        assert checker.is_available(COACH_ID, SCENARIO_DATE, time(10, 30), time(11, 30)) is False
        assert (
            checker.is_available(
                COACH_ID, SCENARIO_DATE, time(10, 30), time(11, 30), exclude_booking_id=booking.id
            )
            is True
        )

    def test_other_coach_and_date_ignored(self, checker, make_booking):
        make_booking(time(10, 0), time(11, 0), coach_id="coach-2")
        make_booking(time(10, 0), time(11, 0), booking_date=SCENARIO_DATE + timedelta(days=1))

        assert checker.is_available(COACH_ID, SCENARIO_DATE, time(10, 0), time(11, 0), "online") is True

    def test_empty_range_is_never_available(self, checker):
        assert checker.is_available(COACH_ID, SCENARIO_DATE, time(11, 0), time(11, 0)) is False
        assert checker.is_available(COACH_ID, SCENARIO_DATE, time(11, 0), time(10, 0)) is False
