"""
Database models for calendar optimization.

- Booking: scheduled coach/client sessions (owned by the booking store)
- ClientProfile: display data used by the client directory
- CalendarOptimizationSuggestion: persisted opportunities and their lifecycle
"""

from .booking import Booking, BookingStatus, LocationType
from .client import ClientProfile
from .optimization_suggestion import (
    CalendarOptimizationSuggestion,
    SuggestionAction,
    SuggestionStatus,
    SuggestionType,
)

__all__ = [
    "Booking",
    "BookingStatus",
    "LocationType",
    "ClientProfile",
    "CalendarOptimizationSuggestion",
    "SuggestionAction",
    "SuggestionStatus",
    "SuggestionType",
]
