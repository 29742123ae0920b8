"""
Contact messages and newsletter subscriptions.
"""

import logging
from typing import Any, Dict

from lifecare.services.notification_service import NotificationService
from lifecare.storage.document_store import DocumentStore
from lifecare.webapp.exceptions import AlreadySubscribedError

logger = logging.getLogger(__name__)


class EnquiryService:
    """Stores contact messages and newsletter sign-ups."""

    def __init__(
        self,
        contacts: DocumentStore,
        subscribers: DocumentStore,
        notifier: NotificationService,
    ) -> None:
        self.contacts = contacts
        self.subscribers = subscribers
        self.notifier = notifier

    def send_contact_message(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a contact message and notify admin and sender.

        Args:
            data: Validated name, email, subject and message.

        Returns:
            The stored contact document.
        """
        contact = self.contacts.insert(
            {
                "name": data["name"],
                "email": data["email"],
                "subject": data["subject"],
                "message": data["message"],
                "status": "new",
            }
        )
        logger.info(f"Contact message {contact['id']} received: {contact['subject']!r}")
        self.notifier.notify_contact(contact)
        return contact

    def subscribe(self, email: str) -> Dict[str, Any]:
        """
        Add an email to the newsletter list.

        Raises:
            AlreadySubscribedError: If the email is already subscribed.
        """
        email = email.strip().lower()
        if self.subscribers.find_one(lambda doc: doc.get("email") == email) is not None:
            raise AlreadySubscribedError(email)

        subscriber = self.subscribers.insert({"email": email})
        logger.info(f"Newsletter subscriber added: {subscriber['id']}")
        self.notifier.notify_newsletter(email)
        return subscriber
