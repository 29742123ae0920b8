"""
Integration tests for the Life Care booking API.

Tests the full request flow through routes, services and storage.
"""

import pytest
from fastapi.testclient import TestClient

from lifecare.webapp.main import create_app


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_full(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "pricing" in data["components"]
        assert "storage" in data["components"]

    def test_health_simple(self, client: TestClient) -> None:
        response = client.get("/health/simple")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_ready(self, client: TestClient) -> None:
        response = client.get("/health/ready")
        assert response.json()["status"] == "ready"

    def test_api_health(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.json() == {"status": "ok", "message": "Server is running"}

    def test_health_reports_unwritable_storage(self, app_config, tmp_path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        app_config.paths.data_dir = str(blocker)

        with TestClient(create_app(app_config, configure_logging=False)) as client:
            data = client.get("/health").json()

        assert data["status"] == "unhealthy"
        assert data["components"]["storage"]["status"] == "error"
        assert "applications" in data["components"]["storage"]["unwritable"]

    def test_process_time_header(self, client: TestClient) -> None:
        response = client.get("/health/simple")
        assert "X-Process-Time" in response.headers


class TestPricingEndpoints:
    """Tests for catalog and price preview endpoints."""

    def test_catalog(self, client: TestClient) -> None:
        data = client.get("/api/pricing/catalog").json()

        assert data["currency"] == "INR"
        assert data["version"]
        assert data["services"]["post_op"]["base_price"] == 1000
        assert data["durations"]["24"] == 2.5
        assert data["discounts"][0] == {"min_days": 90, "factor": 0.85}

    def test_services(self, client: TestClient) -> None:
        data = client.get("/api/pricing/services").json()
        assert data["data"]["wound"]["title"] == "Wound Care"

    def test_durations(self, client: TestClient) -> None:
        data = client.get("/api/pricing/durations").json()
        assert data["data"] == {"4": 0.5, "8": 1.0, "12": 1.4, "24": 2.5}

    def test_price_table(self, client: TestClient) -> None:
        data = client.get("/api/pricing/table", params={"days": 10}).json()

        assert data["days"] == 10
        post_op = next(row for row in data["data"] if row["service"] == "post_op")
        assert post_op["8"] == 9500
        assert post_op["title"] == "Post-Operative Care"

    def test_price_table_rejects_zero_days(self, client: TestClient) -> None:
        response = client.get("/api/pricing/table", params={"days": 0})
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "service, duration, days, expected",
        [
            ("elderly_care", "4", 1, 400),
            ("post_op", "8", 10, 9500),
            ("physio", "24", 30, 81000),
            ("palliative", "12", 90, 117810),
        ],
    )
    def test_calculate_price(self, client: TestClient, service, duration, days, expected) -> None:
        response = client.post(
            "/api/bookings/calculate-price",
            json={"service": service, "duration": duration, "days": days},
        )
        assert response.status_code == 200
        assert response.json()["data"]["price"] == expected

    def test_calculate_price_numeric_duration(self, client: TestClient) -> None:
        response = client.post(
            "/api/bookings/calculate-price",
            json={"service": "post_op", "duration": 8, "days": 10},
        )
        assert response.json()["data"]["price"] == 9500

    def test_calculate_price_invalid_service(self, client: TestClient) -> None:
        response = client.post(
            "/api/bookings/calculate-price",
            json={"service": "unknown", "duration": "8", "days": 5},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["success"] is False
        assert data["error"] == "INVALID_SERVICE"
        assert data["message"] == "Invalid service type: unknown"

    def test_calculate_price_invalid_duration(self, client: TestClient) -> None:
        response = client.post(
            "/api/bookings/calculate-price",
            json={"service": "wound", "duration": "unknown", "days": 5},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_DURATION"

    def test_calculate_price_missing_days(self, client: TestClient) -> None:
        response = client.post(
            "/api/bookings/calculate-price",
            json={"service": "wound", "duration": "8"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"]["errors"][0]["field"] == "days"

    @pytest.mark.parametrize("days", [True, "10", 2.5])
    def test_calculate_price_rejects_non_integer_days(self, client: TestClient, days) -> None:
        response = client.post(
            "/api/bookings/calculate-price",
            json={"service": "post_op", "duration": "8", "days": days},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"]["errors"][0]["field"] == "days"


class TestBookingEndpoints:
    """Tests for booking endpoints."""

    def _create(self, client: TestClient, payload: dict) -> dict:
        response = client.post("/api/bookings", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def test_create_booking(self, client: TestClient, booking_payload: dict) -> None:
        response = client.post("/api/bookings", json=booking_payload)
        assert response.status_code == 201

        data = response.json()
        assert data["success"] is True
        assert data["data"]["price"] == 9500
        assert data["data"]["status"] == "pending"
        assert data["data"]["email"] == "asha.verma@gmail.com"

    def test_create_booking_ignores_price_field(self, client: TestClient, booking_payload: dict) -> None:
        booking = self._create(client, {**booking_payload, "price": 1})
        assert booking["price"] == 9500

    def test_create_booking_sanitizes_notes(self, client: TestClient, booking_payload: dict) -> None:
        booking = self._create(
            client, {**booking_payload, "notes": "Ring twice<script>alert(1)</script>"}
        )
        assert booking["notes"] == "Ring twice"

    def test_create_booking_invalid_service(self, client: TestClient, booking_payload: dict) -> None:
        response = client.post("/api/bookings", json={**booking_payload, "service": "massage"})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_SERVICE"
        assert client.get("/api/bookings").json()["total"] == 0

    @pytest.mark.parametrize(
        "field, value",
        [
            ("phone", "12345"),
            ("email", "not-an-email"),
            ("name", "A"),
            ("days", 0),
            ("days", True),
            ("start_date", "next week"),
        ],
    )
    def test_create_booking_validation(
        self, client: TestClient, booking_payload: dict, field, value
    ) -> None:
        response = client.post("/api/bookings", json={**booking_payload, field: value})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"]["errors"][0]["field"] == field

    def test_get_booking(self, client: TestClient, booking_payload: dict) -> None:
        booking = self._create(client, booking_payload)

        response = client.get(f"/api/bookings/{booking['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == booking["id"]

    def test_get_booking_not_found(self, client: TestClient) -> None:
        response = client.get("/api/bookings/missing")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "BOOKING_NOT_FOUND"
        assert data["message"] == "Booking not found"

    def test_list_bookings(self, client: TestClient, booking_payload: dict) -> None:
        for _ in range(3):
            self._create(client, booking_payload)
        self._create(client, {**booking_payload, "service": "wound"})

        data = client.get("/api/bookings", params={"limit": 2}).json()
        assert data["total"] == 4
        assert data["count"] == 2
        assert data["total_pages"] == 2

        filtered = client.get("/api/bookings", params={"service": "wound"}).json()
        assert filtered["total"] == 1

    def test_list_bookings_invalid_status(self, client: TestClient) -> None:
        response = client.get("/api/bookings", params={"status": "lost"})
        assert response.status_code == 400

    def test_update_booking_status(self, client: TestClient, booking_payload: dict) -> None:
        booking = self._create(client, booking_payload)

        response = client.put(f"/api/bookings/{booking['id']}", json={"status": "confirmed"})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "confirmed"

        confirmed = client.get("/api/bookings", params={"status": "confirmed"}).json()
        assert confirmed["total"] == 1

    def test_update_booking_status_invalid(self, client: TestClient, booking_payload: dict) -> None:
        booking = self._create(client, booking_payload)

        response = client.put(f"/api/bookings/{booking['id']}", json={"status": "lost"})
        assert response.status_code == 400

    def test_delete_booking(self, client: TestClient, booking_payload: dict) -> None:
        booking = self._create(client, booking_payload)

        assert client.delete(f"/api/bookings/{booking['id']}").status_code == 200
        assert client.get(f"/api/bookings/{booking['id']}").status_code == 404
        assert client.delete(f"/api/bookings/{booking['id']}").status_code == 404

    def test_export_bookings(self, client: TestClient, booking_payload: dict) -> None:
        self._create(client, booking_payload)

        response = client.get("/api/bookings/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        assert response.text.splitlines()[0].startswith("id,created_at,name")
        assert len(response.text.splitlines()) == 2

    def test_booking_notifications_in_outbox(self, client: TestClient, booking_payload: dict) -> None:
        self._create(client, booking_payload)

        outbox = client.app.state.registry.notifier.outbox
        kinds = [m["kind"] for m in outbox.read_all()]
        assert kinds == ["booking_confirmation", "admin_booking_notification"]


class TestContactEndpoints:
    """Tests for contact and newsletter endpoints."""

    def test_send_contact_message(self, client: TestClient) -> None:
        response = client.post(
            "/api/contact",
            json={
                "name": "Ravi",
                "email": "ravi@gmail.com",
                "subject": "Rates",
                "message": "Do you cover Pune?",
            },
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_contact_missing_message(self, client: TestClient) -> None:
        response = client.post(
            "/api/contact",
            json={"name": "Ravi", "email": "ravi@gmail.com", "subject": "Rates"},
        )
        assert response.status_code == 400

    def test_newsletter(self, client: TestClient) -> None:
        first = client.post("/api/contact/newsletter", json={"email": "Ravi@Gmail.com"})
        assert first.status_code == 200

        again = client.post("/api/contact/newsletter", json={"email": "ravi@gmail.com"})
        assert again.status_code == 400
        assert again.json()["error"] == "ALREADY_SUBSCRIBED"


class TestReviewEndpoints:
    """Tests for review endpoints."""

    @pytest.fixture
    def review_payload(self) -> dict:
        return {
            "name": "Meera",
            "email": "meera@gmail.com",
            "rating": 5,
            "content": "Caring and punctual nurses",
            "service": "elderly_care",
        }

    def _create(self, client: TestClient, payload: dict) -> dict:
        response = client.post("/api/reviews", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def test_review_moderation_flow(self, client: TestClient, review_payload: dict) -> None:
        review = self._create(client, review_payload)
        assert review["status"] == "pending"

        assert client.get("/api/reviews").json()["total"] == 0
        assert client.get(f"/api/reviews/{review['id']}").status_code == 404

        response = client.put(f"/api/reviews/{review['id']}", json={"status": "approved"})
        assert response.status_code == 200

        assert client.get("/api/reviews").json()["total"] == 1
        assert client.get(f"/api/reviews/{review['id']}").json()["data"]["rating"] == 5

    def test_list_pending_reviews(self, client: TestClient, review_payload: dict) -> None:
        self._create(client, review_payload)

        data = client.get("/api/reviews", params={"status": "pending"}).json()
        assert data["total"] == 1

    def test_review_invalid_rating(self, client: TestClient, review_payload: dict) -> None:
        response = client.post("/api/reviews", json={**review_payload, "rating": 6})

        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "rating"

    def test_review_unknown_service(self, client: TestClient, review_payload: dict) -> None:
        response = client.post("/api/reviews", json={**review_payload, "service": "spa"})
        assert response.status_code == 400

    def test_review_reply_and_delete(self, client: TestClient, review_payload: dict) -> None:
        review = self._create(client, review_payload)

        response = client.post(f"/api/reviews/{review['id']}/reply", json={"reply": "Thank you!"})
        assert response.json()["data"]["admin_reply"]["content"] == "Thank you!"

        assert client.delete(f"/api/reviews/{review['id']}").status_code == 200
        assert client.delete(f"/api/reviews/{review['id']}").status_code == 404


class TestRateLimit:
    """Tests for form submission rate limiting."""

    def test_booking_form_is_rate_limited(self, app_config, booking_payload: dict) -> None:
        app_config.rate_limit.enabled = True
        app_config.rate_limit.booking_rpm = 2

        with TestClient(create_app(app_config, configure_logging=False)) as client:
            for _ in range(2):
                assert client.post("/api/bookings", json=booking_payload).status_code == 201

            response = client.post("/api/bookings", json=booking_payload)

        assert response.status_code == 429
        assert response.json()["error"] == "RATE_LIMITED"
        assert response.headers["Retry-After"] == "60"

    def test_health_is_not_rate_limited(self, app_config) -> None:
        app_config.rate_limit.enabled = True
        app_config.rate_limit.default_rpm = 1

        with TestClient(create_app(app_config, configure_logging=False)) as client:
            for _ in range(3):
                assert client.get("/health/simple").status_code == 200


class TestCareersEndpoints:
    """Tests for careers endpoints."""

    @pytest.fixture
    def application_payload(self) -> dict:
        return {
            "name": "Priya Das",
            "phone": "9123456780",
            "email": "Priya.Das@Gmail.com",
            "address": "Saheed Nagar, Bhubaneswar",
            "position": "nurse",
            "experience": "3-5 years",
            "message": "Available for night shifts",
        }

    def test_positions(self, client: TestClient) -> None:
        data = client.get("/api/careers/positions").json()

        assert data["success"] is True
        assert [p["value"] for p in data["data"]] == ["nurse", "caregiver", "physio", "admin", "other"]

    def test_openings(self, client: TestClient) -> None:
        data = client.get("/api/careers/openings").json()

        assert data["count"] == 3
        assert data["data"][0]["title"] == "Registered Nurse"
        assert data["data"][2]["location"] == "Bhubaneswar, Odisha"

    def test_apply(self, client: TestClient, application_payload: dict) -> None:
        response = client.post("/api/careers/apply", json=application_payload)
        assert response.status_code == 201

        data = response.json()
        assert data["message"] == "Application submitted successfully"
        assert data["data"]["status"] == "pending"
        assert data["data"]["email"] == "priya.das@gmail.com"
        assert "resume" not in data["data"]

        assert client.app.state.registry.stores["applications"].count() == 1
        outbox = client.app.state.registry.notifier.outbox
        kinds = [m["kind"] for m in outbox.read_all()]
        assert kinds == ["application_confirmation", "admin_application_notification"]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("phone", "98765"),
            ("email", "priya"),
            ("position", "surgeon"),
            ("experience", ""),
        ],
    )
    def test_apply_validation(
        self, client: TestClient, application_payload: dict, field, value
    ) -> None:
        response = client.post("/api/careers/apply", json={**application_payload, field: value})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"]["errors"][0]["field"] == field
        assert client.app.state.registry.stores["applications"].count() == 0
