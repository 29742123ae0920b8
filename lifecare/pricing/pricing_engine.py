"""
Pricing engine module.

Computes booking prices from the service catalog.

Formula: P_final = round_half_up(base_price × multiplier × days × discount)
Where:
- base_price = catalog price of the service (per full duration-unit per day)
- multiplier = duration-tier multiplier for the hours of care per day
- discount = factor of the highest discount tier with days >= min_days, else 1
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import pandas as pd

from lifecare.pricing.catalog import (
    DISCOUNT_TIERS,
    DURATIONS,
    SERVICES,
    DiscountTier,
    DurationTier,
    ServiceCatalogEntry,
)
from lifecare.pricing.exceptions import InvalidDaysError, InvalidDurationError, InvalidServiceError

logger = logging.getLogger(__name__)

NO_DISCOUNT = Decimal("1")


@dataclass(frozen=True)
class PriceQuote:
    """A computed price with its breakdown."""

    service: str
    service_title: str
    duration: str
    days: int
    base_price: int
    multiplier: Decimal
    discount_factor: Decimal
    raw_total: Decimal
    price: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "service_title": self.service_title,
            "duration": self.duration,
            "days": self.days,
            "base_price": self.base_price,
            "multiplier": float(self.multiplier),
            "discount_factor": float(self.discount_factor),
            "raw_total": float(self.raw_total),
            "price": self.price,
        }


class PricingEngine:
    """
    Engine for calculating booking prices.

    Stateless between calls: the tables are read-only mappings and nothing
    is cached, so one instance can be shared across threads.

    Attributes:
        services: Service catalog keyed by service id.
        durations: Duration tiers keyed by duration code.
        discount_tiers: Discount ladder, highest threshold first.
    """

    def __init__(
        self,
        services: Mapping[str, ServiceCatalogEntry] = SERVICES,
        durations: Mapping[str, DurationTier] = DURATIONS,
        discount_tiers: tuple[DiscountTier, ...] = DISCOUNT_TIERS,
    ) -> None:
        self.services = services
        self.durations = durations
        self.discount_tiers = tuple(sorted(discount_tiers, key=lambda t: t.min_days, reverse=True))

    def get_base_price(self, service: str) -> int:
        """
        Look up the base price for a service.

        Raises:
            InvalidServiceError: If the service is not in the catalog.
        """
        entry = self.services.get(service) if isinstance(service, str) else None
        if entry is None:
            raise InvalidServiceError(service)
        return entry.base_price

    def get_multiplier(self, duration: str) -> Decimal:
        """
        Look up the multiplier for a duration code.

        Raises:
            InvalidDurationError: If the duration code is unknown.
        """
        tier = self.durations.get(duration) if isinstance(duration, str) else None
        if tier is None:
            raise InvalidDurationError(duration)
        return tier.multiplier

    def check_days(self, days: int) -> int:
        """
        Ensure the day count is a plain integer.

        Raises:
            InvalidDaysError: For booleans, floats, strings and other non-ints.
        """
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidDaysError(days)
        return days

    def get_discount_factor(self, days: int) -> Decimal:
        """Return the factor of the highest tier with days >= min_days, or 1."""
        for tier in self.discount_tiers:
            if days >= tier.min_days:
                return tier.factor
        return NO_DISCOUNT

    def round_price(self, price: Decimal) -> int:
        """Round to the nearest whole unit, halves away from zero."""
        return int(price.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def calculate_quote(self, service: str, duration: str, days: int) -> PriceQuote:
        """
        Calculate a price quote with its breakdown.

        Service is validated before duration, then the day count.

        Args:
            service: Service identifier from the catalog.
            duration: Duration code (hours of care per day).
            days: Number of days, expected >= 1.

        Returns:
            PriceQuote: Breakdown and final integer price.

        Raises:
            InvalidServiceError: Unknown service identifier.
            InvalidDurationError: Unknown duration code.
            InvalidDaysError: Day count is not an integer.
        """
        base_price = self.get_base_price(service)
        multiplier = self.get_multiplier(duration)
        days = self.check_days(days)

        raw_total = Decimal(base_price) * multiplier * Decimal(days)
        discount_factor = self.get_discount_factor(days)
        price = self.round_price(raw_total * discount_factor)

        return PriceQuote(
            service=service,
            service_title=self.get_service_title(service),
            duration=duration,
            days=days,
            base_price=base_price,
            multiplier=multiplier,
            discount_factor=discount_factor,
            raw_total=raw_total,
            price=price,
        )

    def calculate_price(self, service: str, duration: str, days: int) -> int:
        """
        Calculate the final booking price.

        Args:
            service: Service identifier from the catalog.
            duration: Duration code (hours of care per day).
            days: Number of days, expected >= 1.

        Returns:
            int: Price rounded to the nearest whole currency unit.
        """
        return self.calculate_quote(service, duration, days).price

    def get_service_title(self, service_id: str) -> str:
        """Return the catalog title, or the id itself when unknown."""
        entry = self.services.get(service_id) if isinstance(service_id, str) else None
        if entry is None:
            return service_id
        return entry.title

    def get_all_services(self) -> dict[str, dict[str, Any]]:
        """Return a fresh copy of the catalog: {service_id: {title, base_price}}."""
        return {sid: entry.to_dict() for sid, entry in self.services.items()}

    def get_duration_options(self) -> dict[str, float]:
        """Return a fresh copy of the duration table: {code: multiplier}."""
        return {code: float(tier.multiplier) for code, tier in self.durations.items()}

    def get_discount_tiers(self) -> list[dict[str, Any]]:
        """Return the discount ladder, highest threshold first."""
        return [{"min_days": t.min_days, "factor": float(t.factor)} for t in self.discount_tiers]

    def build_price_table(self, days: int) -> pd.DataFrame:
        """
        Build a service × duration grid of prices for a given day count.

        Args:
            days: Number of days to quote.

        Returns:
            pd.DataFrame: One row per service with a title column and one
            price column per duration code.
        """
        rows = []
        for service_id, entry in self.services.items():
            row: dict[str, Any] = {"service": service_id, "title": entry.title}
            for code in self.durations:
                row[code] = self.calculate_price(service_id, code, days)
            rows.append(row)

        df = pd.DataFrame(rows, columns=["service", "title", *self.durations])
        return df.set_index("service")

    def get_pricing_summary(self, service: str, duration: str, days: int) -> str:
        """
        Get a human-readable summary of a price calculation.

        Returns:
            str: Formatted pricing breakdown.
        """
        quote = self.calculate_quote(service, duration, days)
        return (
            f"{quote.service_title}: {quote.base_price} × {quote.multiplier} × "
            f"{quote.days} days = {quote.raw_total} × {quote.discount_factor} = {quote.price}"
        )


_default_engine = PricingEngine()


def get_pricing_engine() -> PricingEngine:
    """Return the shared engine built over the catalog tables."""
    return _default_engine


def calculate_price(service: str, duration: str, days: int) -> int:
    """Convenience function: price for (service, duration, days)."""
    return _default_engine.calculate_price(service, duration, days)


def get_service_title(service_id: str) -> str:
    """Convenience function: catalog title or the id itself."""
    return _default_engine.get_service_title(service_id)


def get_all_services() -> dict[str, dict[str, Any]]:
    """Convenience function: snapshot of the service catalog."""
    return _default_engine.get_all_services()


def get_duration_options() -> dict[str, float]:
    """Convenience function: snapshot of the duration tiers."""
    return _default_engine.get_duration_options()
