"""
Services layer for the Life Care booking API.

Contains business logic extracted from routes for better testability.
"""

from lifecare.services.booking_service import BookingQuery, BookingService
from lifecare.services.careers_service import CareersService
from lifecare.services.enquiry_service import EnquiryService
from lifecare.services.health_service import HealthService
from lifecare.services.notification_service import NotificationService
from lifecare.services.review_service import ReviewQuery, ReviewService

__all__ = [
    "BookingService",
    "BookingQuery",
    "CareersService",
    "EnquiryService",
    "HealthService",
    "NotificationService",
    "ReviewService",
    "ReviewQuery",
]
