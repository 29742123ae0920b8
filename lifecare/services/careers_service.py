"""
Careers service.

Serves the fixed list of positions and current openings, and stores job
applications. Applications are text only; resumes are collected by the
HR team after the first contact.
"""

import copy
import logging
from typing import Any, Dict, List

from lifecare.services.notification_service import NotificationService
from lifecare.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)

POSITIONS = (
    {"value": "nurse", "label": "Registered Nurse"},
    {"value": "caregiver", "label": "Caregiver"},
    {"value": "physio", "label": "Physiotherapist"},
    {"value": "admin", "label": "Administrative Staff"},
    {"value": "other", "label": "Other Healthcare Professional"},
)

POSITION_VALUES = tuple(p["value"] for p in POSITIONS)

JOB_OPENINGS = (
    {
        "id": 1,
        "title": "Registered Nurse",
        "description": "Full-time position for a registered nurse with experience in home healthcare.",
        "requirements": [
            "Valid RN license",
            "Minimum 2 years experience",
            "Home healthcare experience preferred",
        ],
        "location": "Bhubaneswar, Odisha",
        "type": "Full-time",
        "posted_date": "2023-07-15",
    },
    {
        "id": 2,
        "title": "Caregiver",
        "description": "Part-time position for experienced caregivers to provide in-home assistance.",
        "requirements": ["High school diploma", "Caregiving experience", "Compassionate attitude"],
        "location": "Bhubaneswar, Odisha",
        "type": "Part-time",
        "posted_date": "2023-07-20",
    },
    {
        "id": 3,
        "title": "Physiotherapist",
        "description": (
            "Full-time position for a licensed physiotherapist to provide in-home "
            "rehabilitation services."
        ),
        "requirements": [
            "Physiotherapy license",
            "Minimum 3 years experience",
            "Home healthcare experience preferred",
        ],
        "location": "Bhubaneswar, Odisha",
        "type": "Full-time",
        "posted_date": "2023-07-25",
    },
)

APPLICATION_STATUSES = ("pending", "reviewing", "shortlisted", "interviewed", "rejected", "hired")


class CareersService:
    """Service for job positions, openings and applications."""

    def __init__(self, store: DocumentStore, notifier: NotificationService) -> None:
        self.store = store
        self.notifier = notifier

    def get_positions(self) -> List[Dict[str, str]]:
        return [dict(p) for p in POSITIONS]

    def get_openings(self) -> List[Dict[str, Any]]:
        """Current openings; callers get their own copies."""
        return copy.deepcopy(list(JOB_OPENINGS))

    def apply(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a job application and notify applicant and admin.

        Args:
            data: Validated name, phone, email, address, position,
                experience and optional message.

        Returns:
            The stored application document.
        """
        application = self.store.insert(
            {
                "name": data["name"],
                "phone": data["phone"],
                "email": data["email"],
                "address": data["address"],
                "position": data["position"],
                "experience": data["experience"],
                "message": data.get("message"),
                "status": "pending",
            }
        )
        logger.info(f"Job application {application['id']} received for {application['position']}")
        self.notifier.notify_application(application)
        return application
