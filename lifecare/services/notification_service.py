"""
Notification service.

Composes the customer and admin messages sent after bookings, status
changes, contact messages, newsletter sign-ups and job applications, and
records them in the outbox. Transport (SMTP or a mail provider) reads the
outbox and is not part of this application.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from lifecare.pricing.pricing_engine import get_service_title
from lifecare.storage.document_store import utc_now_iso
from lifecare.storage.outbox_store import OutboxStore
from lifecare.utils.config_loader import NotificationsConfig

logger = logging.getLogger(__name__)

STATUS_SUBJECTS = {
    "confirmed": "Confirmed",
    "cancelled": "Cancelled",
    "completed": "Completed",
}

STATUS_MESSAGES = {
    "confirmed": "Your booking has been confirmed. Our care coordinator will contact you shortly.",
    "cancelled": "Your booking has been cancelled. Please contact us if this was unexpected.",
    "completed": "Your care service has been completed. Thank you for choosing us.",
}


@dataclass
class Message:
    """A composed outgoing message."""

    to: str
    subject: str
    body: str
    kind: str
    sender: str = ""
    created_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NotificationService:
    """
    Builds notification messages and hands them to the outbox.

    Failures while recording are logged and swallowed by ``dispatch`` so
    that a persisted booking is never reported as failed.
    """

    def __init__(self, config: NotificationsConfig, outbox: OutboxStore) -> None:
        self.config = config
        self.outbox = outbox

    def dispatch(self, message: Message) -> bool:
        """
        Record a message in the outbox.

        Returns:
            True if recorded, False if disabled or recording failed.
        """
        if not self.config.enabled:
            logger.debug(f"Notifications disabled, dropping {message.kind} to {message.to}")
            return False

        message.sender = message.sender or self.config.from_email
        try:
            self.outbox.append(message.to_dict())
        except OSError as e:
            logger.error(f"Failed to record {message.kind} notification for {message.to}: {e}")
            return False

        logger.info(f"Queued {message.kind} notification to {message.to}")
        return True

    def _signature(self) -> str:
        return f"\n\nWarm regards,\n{self.config.business_name}"

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def booking_confirmation(self, booking: Dict[str, Any]) -> Message:
        """Customer acknowledgement for a new booking."""
        title = booking.get("service_title") or get_service_title(booking["service"])
        body = (
            f"Dear {booking['name']},\n\n"
            f"Thank you for booking with {self.config.business_name}. "
            f"We have received your request.\n\n"
            f"Booking ID: {booking['id']}\n"
            f"Service: {title}\n"
            f"Start date: {booking['start_date']}\n"
            f"Duration: {booking['duration']} hours/day for {booking['days']} days\n"
            f"Estimated price: {booking['price']}\n\n"
            f"Our team will contact you within 24 hours to confirm the details."
            f"{self._signature()}"
        )
        return Message(
            to=booking["email"],
            subject=f"Booking Confirmation - {self.config.business_name}",
            body=body,
            kind="booking_confirmation",
        )

    def admin_booking_notification(self, booking: Dict[str, Any]) -> Message:
        """Admin alert for a new booking."""
        title = booking.get("service_title") or get_service_title(booking["service"])
        body = (
            f"A new booking has been received.\n\n"
            f"Booking ID: {booking['id']}\n"
            f"Name: {booking['name']}\n"
            f"Phone: {booking['phone']}\n"
            f"Email: {booking['email']}\n"
            f"Service: {title}\n"
            f"Price: {booking['price']}"
        )
        return Message(
            to=self.config.admin_email,
            subject=f"New Booking Notification - {self.config.business_name}",
            body=body,
            kind="admin_booking_notification",
        )

    def booking_status_update(self, booking: Dict[str, Any]) -> Message:
        """Customer message after a booking status change."""
        status = booking["status"]
        subject_status = STATUS_SUBJECTS.get(status, "Updated")
        detail = STATUS_MESSAGES.get(status, f"Your booking status is now: {status}.")
        title = booking.get("service_title") or get_service_title(booking["service"])
        body = (
            f"Dear {booking['name']},\n\n"
            f"Booking ID: {booking['id']}\n"
            f"Service: {title}\n\n"
            f"{detail}"
            f"{self._signature()}"
        )
        return Message(
            to=booking["email"],
            subject=f"Booking {subject_status} - {self.config.business_name}",
            body=body,
            kind="booking_status_update",
        )

    # ------------------------------------------------------------------
    # Contact and newsletter
    # ------------------------------------------------------------------

    def contact_submission(self, contact: Dict[str, Any]) -> List[Message]:
        """Admin copy of a contact message plus the sender's acknowledgement."""
        admin = Message(
            to=self.config.admin_email,
            subject=f"New Contact Form Submission: {contact['subject']}",
            body=(
                f"Name: {contact['name']}\n"
                f"Email: {contact['email']}\n"
                f"Subject: {contact['subject']}\n\n"
                f"{contact['message']}"
            ),
            kind="admin_contact_notification",
        )
        acknowledgement = Message(
            to=contact["email"],
            subject=f"We've Received Your Message - {self.config.business_name}",
            body=(
                f"Dear {contact['name']},\n\n"
                f"Thank you for contacting {self.config.business_name}. This is to confirm "
                f'that we have received your message regarding "{contact["subject"]}". '
                f"We will get back to you as soon as possible."
                f"{self._signature()}"
            ),
            kind="contact_acknowledgement",
        )
        return [admin, acknowledgement]

    def newsletter_confirmation(self, email: str) -> Message:
        """Confirmation for a newsletter subscription."""
        return Message(
            to=email,
            subject="Newsletter Subscription Confirmation",
            body=(
                f"Thank you for subscribing to the {self.config.business_name} newsletter. "
                f"You will receive health tips and updates about our services."
                f"{self._signature()}"
            ),
            kind="newsletter_confirmation",
        )

    # ------------------------------------------------------------------
    # Careers
    # ------------------------------------------------------------------

    def application_confirmation(self, application: Dict[str, Any]) -> Message:
        """Applicant acknowledgement for a job application."""
        body = (
            f"Dear {application['name']},\n\n"
            f"Thank you for your interest in joining {self.config.business_name}. "
            f"We have received your application for the position of {application['position']}.\n\n"
            f"Our HR team will review your application and contact you if your "
            f"qualifications match our requirements."
            f"{self._signature()}"
        )
        return Message(
            to=application["email"],
            subject=f"Application Received - {self.config.business_name}",
            body=body,
            kind="application_confirmation",
        )

    def admin_application_notification(self, application: Dict[str, Any]) -> Message:
        """Admin alert for a new job application."""
        body = (
            f"A new job application has been received.\n\n"
            f"Application ID: {application['id']}\n"
            f"Name: {application['name']}\n"
            f"Phone: {application['phone']}\n"
            f"Email: {application['email']}\n"
            f"Address: {application['address']}\n"
            f"Position: {application['position']}\n"
            f"Experience: {application['experience']}\n\n"
            f"{application.get('message') or 'No message provided'}"
        )
        return Message(
            to=self.config.admin_email,
            subject=f"New Job Application: {application['position']} - {self.config.business_name}",
            body=body,
            kind="admin_application_notification",
        )

    # ------------------------------------------------------------------
    # Convenience senders
    # ------------------------------------------------------------------

    def notify_booking_created(self, booking: Dict[str, Any]) -> int:
        """Send customer confirmation and admin alert. Returns messages queued."""
        messages = [self.booking_confirmation(booking), self.admin_booking_notification(booking)]
        return sum(self.dispatch(m) for m in messages)

    def notify_booking_status(self, booking: Dict[str, Any]) -> int:
        return int(self.dispatch(self.booking_status_update(booking)))

    def notify_contact(self, contact: Dict[str, Any]) -> int:
        return sum(self.dispatch(m) for m in self.contact_submission(contact))

    def notify_newsletter(self, email: str) -> int:
        return int(self.dispatch(self.newsletter_confirmation(email)))

    def notify_application(self, application: Dict[str, Any]) -> int:
        """Send applicant acknowledgement and admin alert. Returns messages queued."""
        messages = [
            self.application_confirmation(application),
            self.admin_application_notification(application),
        ]
        return sum(self.dispatch(m) for m in messages)


def build_notification_service(
    config: NotificationsConfig,
    data_dir: str,
    outbox_path: Optional[str] = None,
) -> NotificationService:
    """Create a notification service writing to ``data_dir/outbox_file``."""
    path = outbox_path or str(Path(data_dir) / config.outbox_file)
    return NotificationService(config, OutboxStore(path))
