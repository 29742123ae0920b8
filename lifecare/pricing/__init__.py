"""
Pricing module.

Holds the service catalog and the engine that turns (service, duration, days)
into a booking price with tiered long-duration discounts.
"""

from lifecare.pricing.catalog import CATALOG_VERSION, pricing_contract
from lifecare.pricing.exceptions import (
    InvalidDaysError,
    InvalidDurationError,
    InvalidServiceError,
    PricingError,
)
from lifecare.pricing.pricing_engine import (
    PriceQuote,
    PricingEngine,
    calculate_price,
    get_all_services,
    get_duration_options,
    get_pricing_engine,
    get_service_title,
)

__all__ = [
    "CATALOG_VERSION",
    "PricingEngine",
    "PriceQuote",
    "PricingError",
    "InvalidServiceError",
    "InvalidDurationError",
    "InvalidDaysError",
    "calculate_price",
    "get_service_title",
    "get_all_services",
    "get_duration_options",
    "get_pricing_engine",
    "pricing_contract",
]
