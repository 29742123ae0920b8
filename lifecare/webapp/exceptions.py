"""
Custom exceptions for the Life Care booking API.

Provides a hierarchy of exceptions for clean error handling in routes.
"""

from typing import Optional, Dict, Any


class AppException(Exception):
    """Base exception for application errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if status_code:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "success": False,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AppException):
    """Raised when input validation fails."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class NotFoundError(AppException):
    """Base class for missing resources."""

    status_code = 404
    error_code = "NOT_FOUND"


class BookingNotFoundError(NotFoundError):
    """Raised when a booking is not found."""

    error_code = "BOOKING_NOT_FOUND"

    def __init__(self, booking_id: str):
        super().__init__("Booking not found", details={"booking_id": booking_id})


class ReviewNotFoundError(NotFoundError):
    """Raised when a review is not found or not visible."""

    error_code = "REVIEW_NOT_FOUND"

    def __init__(self, review_id: str):
        super().__init__("Review not found", details={"review_id": review_id})


class AlreadySubscribedError(ValidationError):
    """Raised when an email is already on the newsletter list."""

    error_code = "ALREADY_SUBSCRIBED"

    def __init__(self, email: str):
        super().__init__(
            "Email already subscribed to the newsletter.",
            details={"email": email},
        )

