"""
Review service.

Public submissions start as ``pending`` and only ``approved`` reviews are
shown in public listings.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from lifecare.services.booking_service import Page
from lifecare.storage.document_store import DocumentStore, utc_now_iso
from lifecare.webapp.exceptions import ReviewNotFoundError, ValidationError

logger = logging.getLogger(__name__)

REVIEW_STATUSES = ("pending", "approved", "rejected")


@dataclass
class ReviewQuery:
    """Filters and pagination for listing reviews."""

    page: int = 1
    limit: int = 10
    status: Optional[str] = "approved"
    service: Optional[str] = None
    rating: Optional[int] = None

    def matches(self, review: Dict[str, Any]) -> bool:
        if self.status and review.get("status") != self.status:
            return False
        if self.service and review.get("service") != self.service:
            return False
        if self.rating is not None and review.get("rating") != self.rating:
            return False
        return True


class ReviewService:
    """Service for review submission and moderation."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new review pending moderation."""
        review = self.store.insert(
            {
                "name": data["name"],
                "email": data["email"],
                "rating": data["rating"],
                "content": data["content"],
                "service": data.get("service") or "general",
                "status": "pending",
                "admin_reply": None,
            }
        )
        logger.info(f"Review {review['id']} submitted (rating={review['rating']})")
        return review

    def get(self, review_id: str, public: bool = True) -> Dict[str, Any]:
        """
        Get a review by id.

        Args:
            review_id: Review identifier.
            public: When True, unapproved reviews are treated as missing.

        Raises:
            ReviewNotFoundError: Missing, or hidden from the public.
        """
        review = self.store.get(review_id)
        if review is None or (public and review.get("status") != "approved"):
            raise ReviewNotFoundError(review_id)
        return review

    def list_reviews(self, query: ReviewQuery) -> Page:
        """List reviews newest first."""
        skip = (query.page - 1) * query.limit
        data = self.store.find(query.matches, skip=skip, limit=query.limit)
        total = self.store.count(query.matches)
        return Page(data=data, total=total, page=query.page, limit=query.limit)

    def update_status(self, review_id: str, status: str) -> Dict[str, Any]:
        """
        Moderate a review.

        Raises:
            ValidationError: Unknown status.
            ReviewNotFoundError: Missing review.
        """
        if status not in REVIEW_STATUSES:
            raise ValidationError(
                f"Invalid status: {status}",
                details={"allowed": list(REVIEW_STATUSES)},
            )

        review = self.store.update(review_id, status=status)
        if review is None:
            raise ReviewNotFoundError(review_id)

        logger.info(f"Review {review_id} {status}")
        return review

    def add_reply(self, review_id: str, reply: str) -> Dict[str, Any]:
        """Attach an admin reply to a review."""
        review = self.store.update(
            review_id,
            admin_reply={"content": reply, "date": utc_now_iso()},
        )
        if review is None:
            raise ReviewNotFoundError(review_id)
        return review

    def delete(self, review_id: str) -> None:
        if not self.store.delete(review_id):
            raise ReviewNotFoundError(review_id)
        logger.info(f"Review {review_id} deleted")
