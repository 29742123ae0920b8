"""
Pricing catalog module.

Single definition of the service catalog, duration tiers and discount ladder.
Both the authoritative booking path and the client-facing price preview read
these tables (the preview through ``pricing_contract()``), so there is exactly
one copy of the prices.

Tables are exposed as read-only mappings over frozen dataclasses.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any

# Bump when any price, multiplier or discount changes.
CATALOG_VERSION = "2024.1"

CURRENCY = "INR"


@dataclass(frozen=True)
class ServiceCatalogEntry:
    """A care offering with its base price per full duration-unit per day."""

    service_id: str
    base_price: int
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "base_price": self.base_price}


@dataclass(frozen=True)
class DurationTier:
    """Hours of care per day and the multiplier applied to the base price."""

    code: str
    multiplier: Decimal


@dataclass(frozen=True)
class DiscountTier:
    """Multiplicative discount unlocked when days >= min_days."""

    min_days: int
    factor: Decimal


SERVICES: MappingProxyType = MappingProxyType(
    {
        entry.service_id: entry
        for entry in (
            ServiceCatalogEntry("elderly_care", 800, "Elderly Care"),
            ServiceCatalogEntry("post_op", 1000, "Post-Operative Care"),
            ServiceCatalogEntry("chronic", 900, "Chronic Disease Management"),
            ServiceCatalogEntry("physio", 1200, "Physical Therapy"),
            ServiceCatalogEntry("wound", 700, "Wound Care"),
            ServiceCatalogEntry("palliative", 1100, "Palliative Care"),
        )
    }
)

DURATIONS: MappingProxyType = MappingProxyType(
    {
        tier.code: tier
        for tier in (
            DurationTier("4", Decimal("0.5")),
            DurationTier("8", Decimal("1.0")),
            DurationTier("12", Decimal("1.4")),
            DurationTier("24", Decimal("2.5")),
        )
    }
)

# Highest threshold first; only the first match applies.
DISCOUNT_TIERS: tuple[DiscountTier, ...] = (
    DiscountTier(90, Decimal("0.85")),
    DiscountTier(30, Decimal("0.90")),
    DiscountTier(7, Decimal("0.95")),
)

SERVICE_IDS: tuple[str, ...] = tuple(SERVICES)
DURATION_CODES: tuple[str, ...] = tuple(DURATIONS)


def pricing_contract() -> dict[str, Any]:
    """
    Serialize the pricing tables as a versioned data contract.

    Returns:
        Dict with version, currency, services, durations and discounts.
        Decimals are rendered as floats for JSON clients.
    """
    return {
        "version": CATALOG_VERSION,
        "currency": CURRENCY,
        "services": {sid: entry.to_dict() for sid, entry in SERVICES.items()},
        "durations": {code: float(tier.multiplier) for code, tier in DURATIONS.items()},
        "discounts": [
            {"min_days": tier.min_days, "factor": float(tier.factor)} for tier in DISCOUNT_TIERS
        ],
    }
