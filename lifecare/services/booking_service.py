"""
Booking service.

Handles the booking lifecycle, extracted from routes for testability:
- Pricing a booking through the PricingEngine before it is stored
- Persisting bookings in the document store
- Listing with filters and pagination
- Status updates with customer notification
"""

import io
import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from lifecare.pricing.pricing_engine import PricingEngine
from lifecare.services.notification_service import NotificationService
from lifecare.storage.document_store import DocumentStore, utc_now_iso
from lifecare.utils.logging_config import LogContext
from lifecare.webapp.exceptions import BookingNotFoundError, ValidationError

logger = logging.getLogger(__name__)

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")

EXPORT_COLUMNS = [
    "id",
    "created_at",
    "name",
    "phone",
    "email",
    "address",
    "service",
    "service_title",
    "duration",
    "start_date",
    "days",
    "price",
    "status",
    "notes",
]


@dataclass
class BookingQuery:
    """Filters and pagination for listing bookings."""

    page: int = 1
    limit: int = 10
    status: Optional[str] = None
    service: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def matches(self, booking: Dict[str, Any]) -> bool:
        if self.status and booking.get("status") != self.status:
            return False
        if self.service and booking.get("service") != self.service:
            return False
        start = booking.get("start_date", "")
        if self.start_date and start < self.start_date.isoformat():
            return False
        if self.end_date and start > self.end_date.isoformat():
            return False
        return True


@dataclass
class Page:
    """A page of documents with totals."""

    data: List[Dict[str, Any]]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "count": len(self.data),
            "total": self.total,
            "total_pages": self.total_pages,
            "current_page": self.page,
            "data": self.data,
        }


class BookingService:
    """
    Service for creating and managing bookings.

    A booking is priced before it is written, so a stored booking always
    carries a price the engine could compute.
    """

    def __init__(
        self,
        store: DocumentStore,
        engine: PricingEngine,
        notifier: NotificationService,
    ) -> None:
        self.store = store
        self.engine = engine
        self.notifier = notifier

    def create(self, booking_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Price and store a new booking, then notify customer and admin.

        Args:
            booking_data: Validated form fields (name, phone, email, address,
                service, duration, start_date, days, notes).

        Returns:
            The stored booking document.

        Raises:
            InvalidServiceError: Unknown service.
            InvalidDurationError: Unknown duration code.
        """
        quote = self.engine.calculate_quote(
            booking_data["service"],
            booking_data["duration"],
            booking_data["days"],
        )

        start_date = booking_data["start_date"]
        document = {
            "name": booking_data["name"],
            "phone": booking_data["phone"],
            "email": booking_data["email"],
            "address": booking_data["address"],
            "service": quote.service,
            "service_title": quote.service_title,
            "duration": quote.duration,
            "start_date": start_date.isoformat() if isinstance(start_date, date) else start_date,
            "days": quote.days,
            "notes": booking_data.get("notes") or "",
            "price": quote.price,
            "status": "pending",
            "status_updated_at": None,
        }

        booking = self.store.insert(document)
        with LogContext(logger, booking_id=booking["id"]):
            logger.info(
                f"Booking {booking['id']} created: service={quote.service}, "
                f"duration={quote.duration}, days={quote.days}, price={quote.price}"
            )

        self.notifier.notify_booking_created(booking)
        return booking

    def quote(self, service: str, duration: str, days: int) -> Dict[str, Any]:
        """Price preview without persisting anything."""
        quote = self.engine.calculate_quote(service, duration, days)
        return {
            "service": service,
            "duration": duration,
            "days": days,
            "price": quote.price,
            "breakdown": quote.to_dict(),
        }

    def get(self, booking_id: str) -> Dict[str, Any]:
        """
        Get a booking by id.

        Raises:
            BookingNotFoundError: If no booking has this id.
        """
        booking = self.store.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def list_bookings(self, query: BookingQuery) -> Page:
        """List bookings newest first, filtered and paginated."""
        skip = (query.page - 1) * query.limit
        data = self.store.find(query.matches, skip=skip, limit=query.limit)
        total = self.store.count(query.matches)
        return Page(data=data, total=total, page=query.page, limit=query.limit)

    def update_status(self, booking_id: str, status: str) -> Dict[str, Any]:
        """
        Change a booking's status and notify the customer.

        Raises:
            ValidationError: Unknown status.
            BookingNotFoundError: If no booking has this id.
        """
        if status not in BOOKING_STATUSES:
            raise ValidationError(
                f"Invalid status: {status}",
                details={"allowed": list(BOOKING_STATUSES)},
            )

        booking = self.store.update(booking_id, status=status, status_updated_at=utc_now_iso())
        if booking is None:
            raise BookingNotFoundError(booking_id)

        logger.info(f"Booking {booking_id} status -> {status}")
        self.notifier.notify_booking_status(booking)
        return booking

    def delete(self, booking_id: str) -> None:
        """
        Delete a booking.

        Raises:
            BookingNotFoundError: If no booking has this id.
        """
        if not self.store.delete(booking_id):
            raise BookingNotFoundError(booking_id)
        logger.info(f"Booking {booking_id} deleted")

    def to_dataframe(self, query: Optional[BookingQuery] = None) -> pd.DataFrame:
        """All bookings matching the query filters as a DataFrame."""
        predicate = query.matches if query else None
        bookings = self.store.find(predicate)
        df = pd.DataFrame(bookings, columns=EXPORT_COLUMNS)
        return df

    def export_csv(self, query: Optional[BookingQuery] = None) -> bytes:
        """Export bookings as UTF-8 CSV."""
        df = self.to_dataframe(query)
        buffer = io.StringIO()
        df.to_csv(buffer, index=False)
        logger.info(f"Exported {len(df)} bookings to CSV")
        return buffer.getvalue().encode("utf-8")
