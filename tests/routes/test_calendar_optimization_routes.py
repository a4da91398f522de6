# tests/routes/test_calendar_optimization_routes.py
"""
API tests for the calendar optimization router.

The app is built per test with get_db overridden to the in-memory session.
"""

from datetime import time

from fastapi.testclient import TestClient
import pytest

from calendar_optimizer.database import get_db
from calendar_optimizer.main import create_app
from calendar_optimizer.models.booking import Booking
from calendar_optimizer.models.optimization_suggestion import SuggestionStatus
from calendar_optimizer.services.optimization_suggestion_service import OptimizationSuggestionService
from tests.conftest import COACH_ID, SCENARIO_DATE

BASE = "/api/calendar-optimization"
UNKNOWN_ID = "01J00000000000000000000000"


@pytest.fixture
def client(db):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def scenario(make_booking, make_client):
    make_client("client-2", "Marco")
    make_booking(time(9, 0), time(10, 0), client_id="client-1")
    return make_booking(time(11, 0), time(12, 0), client_id="client-2")


@pytest.fixture
def suggestion_id(db, scenario):
    service = OptimizationSuggestionService(db)
    assert service.generate_weekly_suggestions(COACH_ID, SCENARIO_DATE) == 1
    return service.get_pending_suggestions(COACH_ID)[0].id


def test_detect_gaps(client, scenario):
    response = client.get(f"{BASE}/coaches/{COACH_ID}/gaps", params={"date": "2025-06-01"})

    assert response.status_code == 200
    gaps = response.json()
    assert len(gaps) == 1
    assert gaps[0]["start_time"] == "10:00:00"
    assert gaps[0]["end_time"] == "11:00:00"
    assert gaps[0]["duration_minutes"] == 60
    assert gaps[0]["booking_before"]["client_name"] == "Client"
    assert gaps[0]["booking_after"] == {
        "id": scenario.id,
        "client_name": "Marco",
        "boundary_time": "11:00:00",
    }


def test_detect_gaps_requires_date(client):
    response = client.get(f"{BASE}/coaches/{COACH_ID}/gaps")

    assert response.status_code == 422


def test_summary(client, scenario):
    response = client.get(f"{BASE}/coaches/{COACH_ID}/summary", params={"date": "2025-06-01"})

    assert response.status_code == 200
    body = response.json()
    assert body["total_gap_minutes"] == 60
    assert body["potential_optimizations"] == 1


def test_generate_and_list(client, scenario):
    response = client.post(
        f"{BASE}/coaches/{COACH_ID}/suggestions/generate", params={"week_start": "2025-06-01"}
    )
    assert response.status_code == 200
    assert response.json() == {"suggestions_count": 1}

    listed = client.get(f"{BASE}/coaches/{COACH_ID}/suggestions").json()
    assert len(listed) == 1
    assert listed[0]["source_booking_id"] == scenario.id
    assert listed[0]["status"] == "pending"
    assert listed[0]["suggestion_type"] == "create_block"
    assert listed[0]["benefit_score"] == 55
    assert listed[0]["proposed_start_time"] == "10:00:00"
    assert listed[0]["gap_details"]["new_block_size"] == 600

    count = client.get(f"{BASE}/coaches/{COACH_ID}/suggestions/count").json()
    assert count == {"count": 1}


def test_accept_then_apply(client, db, scenario, suggestion_id):
    accepted = client.post(f"{BASE}/suggestions/{suggestion_id}/accept")
    assert accepted.status_code == 200
    assert accepted.json()["status"] == SuggestionStatus.ACCEPTED.value
    assert accepted.json()["reviewed_at"] is not None

    applied = client.post(f"{BASE}/suggestions/{suggestion_id}/apply")
    assert applied.status_code == 200
    assert applied.json() == {"success": True, "error": None, "code": None}

    booking = db.get(Booking, scenario.id)
    assert booking.start_time == time(10, 0)
    assert booking.rescheduled_by_system is True


def test_reject_twice(client, suggestion_id):
    assert client.post(f"{BASE}/suggestions/{suggestion_id}/reject").status_code == 200

    response = client.post(f"{BASE}/suggestions/{suggestion_id}/reject")

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "INVALID_SUGGESTION_STATE"


def test_apply_pending_is_business_failure(client, suggestion_id):
    response = client.post(f"{BASE}/suggestions/{suggestion_id}/apply")

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "error": "Suggestion must be accepted first",
        "code": "INVALID_SUGGESTION_STATE",
    }


def test_unknown_suggestion_is_404(client):
    accept = client.post(f"{BASE}/suggestions/{UNKNOWN_ID}/accept")
    apply = client.post(f"{BASE}/suggestions/{UNKNOWN_ID}/apply")

    assert accept.status_code == 404
    assert accept.json()["detail"]["code"] == "SUGGESTION_NOT_FOUND"
    assert apply.status_code == 404
    assert apply.json()["detail"]["code"] == "SUGGESTION_NOT_FOUND"


def test_metrics_endpoint(client, scenario):
    client.get(f"{BASE}/coaches/{COACH_ID}/gaps", params={"date": "2025-06-01"})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "calendar_optimizer_service_operations_total" in response.text
