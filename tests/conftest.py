"""
Shared fixtures for the Life Care test suite.
"""

import pytest
from fastapi.testclient import TestClient

from lifecare.pricing.pricing_engine import PricingEngine
from lifecare.services.booking_service import BookingService
from lifecare.services.notification_service import NotificationService
from lifecare.storage.document_store import DocumentStore
from lifecare.storage.outbox_store import OutboxStore
from lifecare.utils.config_loader import AppConfig
from lifecare.webapp.main import create_app


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    """Configuration pointing all storage at a temp directory."""
    config = AppConfig()
    config.paths.data_dir = str(tmp_path / "data")
    config.rate_limit.enabled = False
    return config


@pytest.fixture
def engine() -> PricingEngine:
    return PricingEngine()


@pytest.fixture
def outbox(tmp_path) -> OutboxStore:
    return OutboxStore(str(tmp_path / "outbox.jsonl"))


@pytest.fixture
def notifier(app_config: AppConfig, outbox: OutboxStore) -> NotificationService:
    return NotificationService(app_config.notifications, outbox)


@pytest.fixture
def booking_service(tmp_path, engine, notifier) -> BookingService:
    return BookingService(DocumentStore("bookings", str(tmp_path)), engine, notifier)


@pytest.fixture
def booking_payload() -> dict:
    """A valid booking form submission."""
    return {
        "name": "Asha Verma",
        "phone": "9876543210",
        "email": "Asha.Verma@Gmail.com",
        "address": "12 MG Road, Pune",
        "service": "post_op",
        "duration": "8",
        "start_date": "2025-03-01",
        "days": 10,
        "notes": "Patient recovering from knee surgery",
    }


@pytest.fixture
def client(app_config: AppConfig):
    """Test client for an app backed by a temp data directory."""
    app = create_app(app_config, configure_logging=False)
    with TestClient(app) as c:
        yield c
