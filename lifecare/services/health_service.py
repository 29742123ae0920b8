"""
Health check service for monitoring application status.

Provides detailed health information about all system components.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from lifecare.pricing.catalog import CATALOG_VERSION
from lifecare.pricing.exceptions import PricingError
from lifecare.pricing.pricing_engine import PricingEngine, get_pricing_engine
from lifecare.storage.document_store import COLLECTIONS, DocumentStore
from lifecare.utils.config_loader import AppConfig, load_config

logger = logging.getLogger(__name__)

# Known quote used as a pricing self-check: post_op, 8h/day, 10 days
SELF_CHECK_QUOTE = ("post_op", "8", 10, 9500)


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: str  # "ok", "degraded", "error"
    message: Optional[str] = None
    latency_ms: Optional[float] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
        }
        if self.message:
            result["message"] = self.message
        if self.latency_ms is not None:
            result["latency_ms"] = round(self.latency_ms, 2)
        if self.details:
            result.update(self.details)
        return result


@dataclass
class HealthReport:
    """Complete health report for the application."""

    status: str  # "healthy", "degraded", "unhealthy"
    timestamp: str
    version: str
    components: Dict[str, ComponentHealth] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "timestamp": self.timestamp,
            "version": self.version,
            "components": {name: comp.to_dict() for name, comp in self.components.items()},
        }


class HealthService:
    """Service for checking application health."""

    VERSION = "1.0.0"

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        engine: Optional[PricingEngine] = None,
        stores: Optional[Sequence[DocumentStore]] = None,
    ):
        self.config = config or load_config()
        self.engine = engine or get_pricing_engine()
        if stores is None:
            data_dir = self.config.paths.data_dir
            stores = [DocumentStore(name, data_dir) for name in COLLECTIONS]
        self.stores = list(stores)

    def get_full_health(self) -> HealthReport:
        """
        Get complete health report for all components.

        Returns:
            HealthReport with status of all components.
        """
        components = {
            "pricing": self._check_pricing(),
            "storage": self._check_storage(),
            "notifications": self._check_notifications(),
        }

        statuses = [c.status for c in components.values()]
        if all(s == "ok" for s in statuses):
            overall_status = "healthy"
        elif any(s == "error" for s in statuses):
            overall_status = "unhealthy"
        else:
            overall_status = "degraded"

        return HealthReport(
            status=overall_status,
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=self.VERSION,
            components=components,
        )

    def _check_pricing(self) -> ComponentHealth:
        """Run a known quote through the engine."""
        service, duration, days, expected = SELF_CHECK_QUOTE
        start = time.time()
        try:
            price = self.engine.calculate_price(service, duration, days)
        except PricingError as e:
            logger.error(f"Pricing self-check failed: {e}")
            return ComponentHealth(name="pricing", status="error", message=str(e))
        latency = (time.time() - start) * 1000

        if price != expected:
            return ComponentHealth(
                name="pricing",
                status="error",
                message=f"Self-check quote returned {price}, expected {expected}",
            )

        return ComponentHealth(
            name="pricing",
            status="ok",
            message=f"{len(self.engine.services)} services priced",
            latency_ms=latency,
            details={"catalog_version": CATALOG_VERSION},
        )

    def _check_storage(self) -> ComponentHealth:
        """Check every collection can be written."""
        paths = sorted({str(store.data_dir) for store in self.stores})
        unwritable = [store.collection for store in self.stores if not store.is_writable()]

        if unwritable:
            return ComponentHealth(
                name="storage",
                status="error",
                message="Data directory is not writable",
                details={"paths": paths, "unwritable": unwritable},
            )

        return ComponentHealth(
            name="storage",
            status="ok",
            message="Data directory writable",
            details={"paths": paths, "collections": [store.collection for store in self.stores]},
        )

    def _check_notifications(self) -> ComponentHealth:
        """Report whether notifications are being recorded."""
        if not self.config.notifications.enabled:
            return ComponentHealth(
                name="notifications",
                status="degraded",
                message="Notifications disabled",
            )
        return ComponentHealth(
            name="notifications",
            status="ok",
            message="Recording to outbox",
            details={"outbox": self.config.notifications.outbox_file},
        )
