"""
FastAPI routes for the Life Care booking API.

Handles:
- Pricing catalog and price preview
- Booking creation, lookup, listing, status updates, deletion and export
- Contact messages and newsletter subscriptions
- Review submission and moderation
- Careers: positions, openings and job applications
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from lifecare.pricing.catalog import pricing_contract
from lifecare.pricing.pricing_engine import PricingEngine, get_pricing_engine
from lifecare.services.booking_service import BookingQuery, BookingService
from lifecare.services.careers_service import CareersService
from lifecare.services.enquiry_service import EnquiryService
from lifecare.services.notification_service import NotificationService, build_notification_service
from lifecare.services.review_service import ReviewQuery, ReviewService
from lifecare.storage.document_store import COLLECTIONS, DocumentStore
from lifecare.utils.config_loader import AppConfig
from lifecare.webapp.helpers import resolve_page_size
from lifecare.webapp.schemas import (
    ApplicationCreate,
    BookingCreate,
    BookingStatus,
    BookingStatusUpdate,
    ContactCreate,
    NewsletterSubscribe,
    PriceQuoteRequest,
    ReviewCreate,
    ReviewReply,
    ReviewStatus,
    ReviewStatusUpdate,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Dependency Injection
# ============================================================================

@dataclass
class ServiceRegistry:
    """Services shared by all requests of one app instance."""

    config: AppConfig
    engine: PricingEngine
    notifier: NotificationService
    bookings: BookingService
    enquiries: EnquiryService
    reviews: ReviewService
    careers: CareersService
    stores: Dict[str, DocumentStore]


def build_registry(config: AppConfig) -> ServiceRegistry:
    """
    Wire stores and services for a configuration.

    Args:
        config: Application configuration (data_dir decides where
            collections and the outbox live).

    Returns:
        ServiceRegistry: Ready-to-use services.
    """
    data_dir = config.paths.data_dir

    engine = get_pricing_engine()
    notifier = build_notification_service(config.notifications, data_dir)
    stores = {name: DocumentStore(name, data_dir) for name in COLLECTIONS}

    registry = ServiceRegistry(
        config=config,
        engine=engine,
        notifier=notifier,
        bookings=BookingService(stores["bookings"], engine, notifier),
        enquiries=EnquiryService(stores["contacts"], stores["subscribers"], notifier),
        reviews=ReviewService(stores["reviews"]),
        careers=CareersService(stores["applications"], notifier),
        stores=stores,
    )
    logger.info(f"Services initialised with data directory: {data_dir}")
    return registry


def get_registry(request: Request) -> ServiceRegistry:
    """FastAPI dependency: the registry stored on the app."""
    return request.app.state.registry


def get_booking_service(registry: ServiceRegistry = Depends(get_registry)) -> BookingService:
    return registry.bookings


def get_enquiry_service(registry: ServiceRegistry = Depends(get_registry)) -> EnquiryService:
    return registry.enquiries


def get_review_service(registry: ServiceRegistry = Depends(get_registry)) -> ReviewService:
    return registry.reviews


def get_careers_service(registry: ServiceRegistry = Depends(get_registry)) -> CareersService:
    return registry.careers


def _page_size(registry: ServiceRegistry, limit: Optional[int]) -> int:
    return resolve_page_size(
        limit,
        registry.config.bookings.default_page_size,
        registry.config.bookings.max_page_size,
    )


router = APIRouter(prefix="/api")


# ============================================================================
# Pricing
# ============================================================================

@router.get("/pricing/catalog")
def get_pricing_catalog() -> Dict[str, Any]:
    """Versioned pricing tables for the client-side price preview."""
    return pricing_contract()


@router.get("/pricing/services")
def list_services(registry: ServiceRegistry = Depends(get_registry)) -> Dict[str, Any]:
    return {"success": True, "data": registry.engine.get_all_services()}


@router.get("/pricing/durations")
def list_durations(registry: ServiceRegistry = Depends(get_registry)) -> Dict[str, Any]:
    return {"success": True, "data": registry.engine.get_duration_options()}


@router.get("/pricing/table")
def get_price_table(
    days: int = Query(1, ge=1, le=3650),
    registry: ServiceRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    """Service × duration price grid for a day count."""
    df = registry.engine.build_price_table(days)
    return {
        "success": True,
        "days": days,
        "discounts": registry.engine.get_discount_tiers(),
        "data": df.reset_index().to_dict(orient="records"),
    }


@router.post("/bookings/calculate-price")
def calculate_price(
    body: PriceQuoteRequest,
    bookings: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """Price preview; unknown service/duration become 400 responses."""
    return {"success": True, "data": bookings.quote(body.service, body.duration, body.days)}


# ============================================================================
# Bookings
# ============================================================================

@router.post("/bookings", status_code=201)
def create_booking(
    body: BookingCreate,
    bookings: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    booking = bookings.create(body.model_dump())
    return {
        "success": True,
        "message": "Booking created successfully",
        "data": booking,
    }


@router.get("/bookings")
def list_bookings(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    status: Optional[BookingStatus] = None,
    service: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    registry: ServiceRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    query = BookingQuery(
        page=page,
        limit=_page_size(registry, limit),
        status=status,
        service=service,
        start_date=start_date,
        end_date=end_date,
    )
    return registry.bookings.list_bookings(query).to_dict()


@router.get("/bookings/export")
def export_bookings(
    status: Optional[BookingStatus] = None,
    service: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    bookings: BookingService = Depends(get_booking_service),
) -> Response:
    """Download bookings as CSV."""
    query = BookingQuery(status=status, service=service, start_date=start_date, end_date=end_date)
    content = bookings.export_csv(query)
    filename = f"bookings_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/bookings/{booking_id}")
def get_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return {"success": True, "data": bookings.get(booking_id)}


@router.put("/bookings/{booking_id}")
def update_booking_status(
    booking_id: str,
    body: BookingStatusUpdate,
    bookings: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    booking = bookings.update_status(booking_id, body.status)
    return {
        "success": True,
        "message": "Booking status updated successfully",
        "data": booking,
    }


@router.delete("/bookings/{booking_id}")
def delete_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    bookings.delete(booking_id)
    return {"success": True, "message": "Booking deleted successfully"}


# ============================================================================
# Contact
# ============================================================================

@router.post("/contact")
def send_contact_message(
    body: ContactCreate,
    enquiries: EnquiryService = Depends(get_enquiry_service),
) -> Dict[str, Any]:
    enquiries.send_contact_message(body.model_dump())
    return {"success": True, "message": "Your message has been sent successfully."}


@router.post("/contact/newsletter")
def subscribe_newsletter(
    body: NewsletterSubscribe,
    enquiries: EnquiryService = Depends(get_enquiry_service),
) -> Dict[str, Any]:
    enquiries.subscribe(body.email)
    return {
        "success": True,
        "message": "You have successfully subscribed to our newsletter.",
    }


# ============================================================================
# Reviews
# ============================================================================

@router.get("/reviews")
def list_reviews(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    service: Optional[str] = None,
    rating: Optional[int] = Query(None, ge=1, le=5),
    status: ReviewStatus = "approved",
    registry: ServiceRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    # TODO: restrict non-approved listings to admins once authentication exists
    query = ReviewQuery(
        page=page,
        limit=_page_size(registry, limit),
        status=status,
        service=service,
        rating=rating,
    )
    return registry.reviews.list_reviews(query).to_dict()


@router.get("/reviews/{review_id}")
def get_review(
    review_id: str,
    reviews: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    return {"success": True, "data": reviews.get(review_id)}


@router.post("/reviews", status_code=201)
def create_review(
    body: ReviewCreate,
    reviews: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review = reviews.create(body.model_dump())
    return {
        "success": True,
        "message": "Thank you for your review! It has been submitted for approval.",
        "data": review,
    }


@router.put("/reviews/{review_id}")
def update_review_status(
    review_id: str,
    body: ReviewStatusUpdate,
    reviews: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review = reviews.update_status(review_id, body.status)
    return {"success": True, "message": f"Review {body.status}", "data": review}


@router.post("/reviews/{review_id}/reply")
def reply_to_review(
    review_id: str,
    body: ReviewReply,
    reviews: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review = reviews.add_reply(review_id, body.reply)
    return {"success": True, "message": "Reply added successfully", "data": review}


@router.delete("/reviews/{review_id}")
def delete_review(
    review_id: str,
    reviews: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    reviews.delete(review_id)
    return {"success": True, "message": "Review deleted successfully"}


# ============================================================================
# Careers
# ============================================================================

@router.get("/careers/positions")
def list_positions(careers: CareersService = Depends(get_careers_service)) -> Dict[str, Any]:
    return {"success": True, "data": careers.get_positions()}


@router.get("/careers/openings")
def list_openings(careers: CareersService = Depends(get_careers_service)) -> Dict[str, Any]:
    openings = careers.get_openings()
    return {"success": True, "count": len(openings), "data": openings}


@router.post("/careers/apply", status_code=201)
def submit_application(
    body: ApplicationCreate,
    careers: CareersService = Depends(get_careers_service),
) -> Dict[str, Any]:
    application = careers.apply(body.model_dump())
    return {
        "success": True,
        "message": "Application submitted successfully",
        "data": application,
    }
