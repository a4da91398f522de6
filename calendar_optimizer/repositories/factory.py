# calendar_optimizer/repositories/factory.py
"""
Repository Factory

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .client_repository import ClientRepository
    from .suggestion_repository import SuggestionRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking queries and reschedules."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_client_repository(db: Session) -> "ClientRepository":
        """Create repository for client directory lookups."""
        from .client_repository import ClientRepository

        return ClientRepository(db)

    @staticmethod
    def create_suggestion_repository(db: Session) -> "SuggestionRepository":
        """Create repository for optimization suggestions."""
        from .suggestion_repository import SuggestionRepository

        return SuggestionRepository(db)
