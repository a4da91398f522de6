"""
Service layer for calendar optimization.

- CalendarOptimizationService: gap detection, preference scoring, opportunity analysis
- OptimizationSuggestionService: suggestion lifecycle (create/respond/apply/expire)
- BookingConflictChecker: default availability oracle backed by the booking store
- scoring: pure benefit/preference/block-size functions
"""

from .calendar_optimization_service import CalendarOptimizationService
from .conflict_checker import BookingConflictChecker, SlotAvailabilityChecker
from .optimization_suggestion_service import OptimizationSuggestionService

__all__ = [
    "BookingConflictChecker",
    "CalendarOptimizationService",
    "OptimizationSuggestionService",
    "SlotAvailabilityChecker",
]
