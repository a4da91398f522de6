"""
Repository layer for data access, separating business logic from queries.

Usage:
    from calendar_optimizer.repositories import RepositoryFactory

    repository = RepositoryFactory.create_booking_repository(db)
    bookings = repository.get_confirmed_bookings_for_date(coach_id, target_date)
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .client_repository import ClientRepository
from .factory import RepositoryFactory
from .suggestion_repository import SuggestionRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "ClientRepository",
    "RepositoryFactory",
    "SuggestionRepository",
]
