# tests/repositories/test_suggestion_repository.py
from datetime import datetime, time, timedelta, timezone

import pytest

from calendar_optimizer.models.optimization_suggestion import SuggestionStatus, SuggestionType
from calendar_optimizer.repositories import RepositoryFactory
from tests.conftest import COACH_ID, SCENARIO_DATE

NOW = datetime(2025, 5, 30, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository(db):
    return RepositoryFactory.create_suggestion_repository(db)


@pytest.fixture
def make_suggestion(db, repository, make_booking):
    booking = make_booking(time(11, 0), time(12, 0))

    def _make_suggestion(
        *,
        benefit_score: int = 55,
        status: SuggestionStatus = SuggestionStatus.PENDING,
        expires_at: datetime = NOW + timedelta(days=7),
        coach_id: str = COACH_ID,
    ):
        suggestion = repository.create(
            coach_id=coach_id,
            client_id=booking.client_id,
            source_booking_id=booking.id,
            suggestion_type=SuggestionType.CREATE_BLOCK.value,
            proposed_date=SCENARIO_DATE,
            proposed_start_time=time(10, 0),
            proposed_end_time=time(11, 0),
            location_type=booking.location_type,
            gap_details={"freed_minutes": 60},
            reason_short="Move to 10:00 to free 60 min",
            reason_detailed="Moving Client's session from 11:00 to 10:00 frees a block of 60 minutes.",
            benefit_score=benefit_score,
            client_preference_score=50,
            status=status.value,
            expires_at=expires_at,
        )
        db.commit()
        return suggestion

    return _make_suggestion


class TestSuggestionRepository:
    def test_pending_sorted_by_score(self, repository, make_suggestion):
        low = make_suggestion(benefit_score=40)
        high = make_suggestion(benefit_score=80)
        make_suggestion(benefit_score=90, status=SuggestionStatus.ACCEPTED)
        make_suggestion(benefit_score=95, expires_at=NOW - timedelta(minutes=1))
        make_suggestion(benefit_score=99, coach_id="coach-2")

        pending = repository.get_pending_for_coach(COACH_ID, NOW)

        assert [s.id for s in pending] == [high.id, low.id]
        assert repository.count_pending_for_coach(COACH_ID, NOW) == 2

    def test_history_includes_every_status(self, repository, make_suggestion):
        first = make_suggestion()
        second = make_suggestion(status=SuggestionStatus.REJECTED)

        assert {s.id for s in repository.get_for_coach(COACH_ID)} == {first.id, second.id}
        assert [s.id for s in repository.get_for_coach(COACH_ID, [SuggestionStatus.REJECTED])] == [second.id]

    def test_expire_pending_before(self, db, repository, make_suggestion):
        stale = make_suggestion(expires_at=NOW - timedelta(hours=1))
        fresh = make_suggestion()
        accepted = make_suggestion(status=SuggestionStatus.ACCEPTED, expires_at=NOW - timedelta(hours=1))

        assert repository.expire_pending_before(NOW) == 1
        db.commit()

        assert stale.status == SuggestionStatus.EXPIRED.value
        assert fresh.status == SuggestionStatus.PENDING.value
        assert accepted.status == SuggestionStatus.ACCEPTED.value
        assert repository.expire_pending_before(NOW) == 0
