# tests/unit/test_exceptions.py
from calendar_optimizer.core.exceptions import (
    ServiceException,
    SlotNoLongerAvailableException,
    SuggestionNotFoundException,
    SuggestionStateException,
)


def test_not_found_maps_to_404():
    http_exc = SuggestionNotFoundException("abc").to_http_exception()

    assert http_exc.status_code == 404
    assert http_exc.detail == {
        "message": "Suggestion not found",
        "code": "SUGGESTION_NOT_FOUND",
        "details": {"suggestion_id": "abc"},
    }


def test_state_exception_carries_statuses():
    exc = SuggestionStateException(
        "Suggestion is already rejected",
        suggestion_id="abc",
        current_status="rejected",
        required_status="pending",
    )

    assert exc.to_http_exception().status_code == 422
    assert exc.details["current_status"] == "rejected"
    assert str(exc) == "Suggestion is already rejected"


def test_slot_conflict_maps_to_409():
    exc = SlotNoLongerAvailableException("abc", details={"proposed_date": "2025-06-01"})

    assert exc.to_http_exception().status_code == 409
    assert exc.details == {"suggestion_id": "abc", "proposed_date": "2025-06-01"}


def test_service_exception_defaults_code_to_class_name():
    exc = ServiceException("boom")

    assert exc.code == "ServiceException"
    assert exc.to_http_exception().status_code == 500
