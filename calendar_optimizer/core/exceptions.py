# calendar_optimizer/core/exceptions.py
"""
Domain-specific exceptions for calendar optimization.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""


# Specific business exceptions


class SuggestionNotFoundException(NotFoundException):
    """Raised when an optimization suggestion id does not exist."""

    def __init__(self, suggestion_id: str):
        super().__init__(
            message="Suggestion not found",
            code="SUGGESTION_NOT_FOUND",
            details={"suggestion_id": suggestion_id},
        )


class SuggestionStateException(BusinessRuleException):
    """Raised when a lifecycle operation is called from the wrong status."""

    def __init__(self, message: str, *, suggestion_id: str, current_status: str, required_status: str):
        super().__init__(
            message=message,
            code="INVALID_SUGGESTION_STATE",
            details={
                "suggestion_id": suggestion_id,
                "current_status": current_status,
                "required_status": required_status,
            },
        )


class SlotNoLongerAvailableException(ConflictException):
    """Raised when a proposed slot was taken between scoring and apply."""

    def __init__(self, suggestion_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Slot is no longer available",
            code="SLOT_NO_LONGER_AVAILABLE",
            details={"suggestion_id": suggestion_id, **(details or {})},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
