"""
Pydantic models for request bodies in the web application.

Provides request validation with sensible defaults and constraints.
String inputs are stripped and sanitized before validation.
"""

from datetime import date
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

from lifecare.pricing.catalog import SERVICE_IDS
from lifecare.services.careers_service import POSITION_VALUES
from lifecare.webapp.helpers import sanitize_text

PHONE_PATTERN = r"^[0-9]{10}$"

BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]
ReviewStatus = Literal["pending", "approved", "rejected"]


class SanitizedModel(BaseModel):
    """Base model that sanitizes every incoming string field."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("*", mode="before")
    @classmethod
    def sanitize_strings(cls, v):
        return sanitize_text(v)


# Emails are stored lower-cased
LowerEmail = Annotated[EmailStr, AfterValidator(str.lower)]


class PriceQuoteRequest(SanitizedModel):
    """
    Request model for the price preview.

    Service and duration are checked against the catalog by the pricing
    engine, so unknown values surface as pricing errors rather than schema
    errors.
    """

    service: str = Field(..., min_length=1, description="Service identifier")
    duration: str = Field(..., min_length=1, description="Hours of care per day")
    days: int = Field(..., ge=1, strict=True, description="Number of days (>= 1)")

    @field_validator("duration", mode="before")
    @classmethod
    def duration_to_str(cls, v):
        """Accept numeric duration codes from form inputs."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class BookingCreate(PriceQuoteRequest):
    """Request model for creating a booking."""

    name: str = Field(..., min_length=2, max_length=50, description="Customer name")
    phone: str = Field(..., pattern=PHONE_PATTERN, description="10-digit phone number")
    email: LowerEmail
    address: str = Field(..., min_length=1, description="Care address")
    start_date: date = Field(..., description="First day of care (ISO 8601)")
    notes: Optional[str] = Field(None, max_length=2000)


class BookingStatusUpdate(BaseModel):
    """Request model for booking status changes."""

    status: BookingStatus


class ContactCreate(SanitizedModel):
    """Request model for the contact form."""

    name: str = Field(..., min_length=1, max_length=100)
    email: LowerEmail
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


class NewsletterSubscribe(SanitizedModel):
    """Request model for newsletter sign-up."""

    email: LowerEmail


class ReviewCreate(SanitizedModel):
    """Request model for submitting a review."""

    name: str = Field(..., min_length=1, max_length=100)
    email: LowerEmail
    rating: int = Field(..., ge=1, le=5, strict=True)
    content: str = Field(..., min_length=1, max_length=5000)
    service: str = Field("general", description="Service reviewed, or 'general'")

    @field_validator("service")
    @classmethod
    def validate_service(cls, v):
        if v not in SERVICE_IDS and v != "general":
            raise ValueError(f"Unknown service: {v}")
        return v


class ReviewStatusUpdate(BaseModel):
    """Request model for review moderation."""

    status: ReviewStatus


class ReviewReply(SanitizedModel):
    """Request model for an admin reply."""

    reply: str = Field(..., min_length=1, max_length=2000)


class ApplicationCreate(SanitizedModel):
    """Request model for a job application."""

    name: str = Field(..., min_length=2, max_length=50)
    phone: str = Field(..., pattern=PHONE_PATTERN, description="10-digit phone number")
    email: LowerEmail
    address: str = Field(..., min_length=1, max_length=500)
    position: str = Field(..., description="One of the advertised position values")
    experience: str = Field(..., min_length=1, max_length=100)
    message: Optional[str] = Field(None, max_length=5000)

    @field_validator("position")
    @classmethod
    def validate_position(cls, v):
        if v not in POSITION_VALUES:
            raise ValueError(f"Unknown position: {v}")
        return v
