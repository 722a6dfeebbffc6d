"""
Tests for the Gated API endpoints.

The app runs with its real lifespan against a temporary SQLite database and
settings file; only the tracking webhook is mocked.
"""

from datetime import date
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from gated.api.main import app
from gated.models.order import SIMULATED_MARKER
from gated.sync.reconciler import is_temporary_id
from gated.tracking.ingestor import DEGRADED_NOTICE

# Test user ID (valid UUID format)
TEST_USER_ID = "d5314b80-4aac-4bf2-940c-0a0ceda5bff4"
TEST_HEADERS = {"X-User-ID": TEST_USER_ID}

SAMPLE_GARMENT = {
    "name": "Box Logo Hoodie",
    "brand": "Supreme",
    "category": "Tops",
    "color": "Heather Grey",
    "image_url": "https://picsum.photos/400/400?random=1",
    "date_added": "2023-10-15",
}


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client with the lifespan running against temporary storage."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("GATED_SETTINGS_PATH", str(tmp_path / "settings.json"))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def signed_in(client: TestClient) -> TestClient:
    response = client.post("/api/v1/session", headers=TEST_HEADERS)
    assert response.status_code == 200
    return client


class TestHealthEndpoints:
    """Test health check and root endpoints"""

    def test_root_endpoint(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "Gated API"
        assert data["status"] == "operational"

    def test_health_endpoint(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"


class TestSession:
    """Tests for sign in/out"""

    def test_missing_user_header(self, client: TestClient):
        response = client.get("/api/v1/garments")
        assert response.status_code == 401

    def test_invalid_user_header(self, client: TestClient):
        response = client.post("/api/v1/session", headers={"X-User-ID": "bob"})
        assert response.status_code == 400

    def test_collections_require_session(self, client: TestClient):
        response = client.get("/api/v1/garments", headers=TEST_HEADERS)
        assert response.status_code == 401
        assert "No active session" in response.json()["detail"]

    def test_sign_in(self, client: TestClient):
        response = client.post("/api/v1/session", headers=TEST_HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["owner_id"] == TEST_USER_ID
        assert data["garments"] == 0
        assert data["pending"] == 0

    def test_sign_out_clears_session(self, signed_in: TestClient):
        signed_in.post("/api/v1/garments", json=SAMPLE_GARMENT, headers=TEST_HEADERS)

        response = signed_in.delete("/api/v1/session", headers=TEST_HEADERS)
        assert response.status_code == 204

        response = signed_in.get("/api/v1/garments", headers=TEST_HEADERS)
        assert response.status_code == 401

        response = signed_in.delete("/api/v1/session", headers=TEST_HEADERS)
        assert response.status_code == 404

    def test_collections_persist_across_sessions(self, signed_in: TestClient):
        signed_in.post("/api/v1/garments", json=SAMPLE_GARMENT, headers=TEST_HEADERS)
        signed_in.post("/api/v1/session/refresh", headers=TEST_HEADERS)
        signed_in.delete("/api/v1/session", headers=TEST_HEADERS)

        response = signed_in.post("/api/v1/session", headers=TEST_HEADERS)

        assert response.json()["garments"] == 1


class TestGarments:
    """Tests for the wardrobe endpoints"""

    def test_add_garment_is_optimistic(self, signed_in: TestClient):
        response = signed_in.post(
            "/api/v1/garments", json=SAMPLE_GARMENT, headers=TEST_HEADERS
        )

        assert response.status_code == 202
        data = response.json()
        assert is_temporary_id(data["id"])
        assert data["name"] == "Box Logo Hoodie"
        assert data["date_added"] == "2023-10-15"

    def test_added_garment_is_confirmed(self, signed_in: TestClient):
        signed_in.post("/api/v1/garments", json=SAMPLE_GARMENT, headers=TEST_HEADERS)

        signed_in.post("/api/v1/session/refresh", headers=TEST_HEADERS)
        response = signed_in.get("/api/v1/garments", headers=TEST_HEADERS)

        garments = response.json()
        assert len(garments) == 1
        assert not is_temporary_id(garments[0]["id"])
        assert garments[0]["color"] == "Heather Grey"

    def test_color_defaults_to_multi(self, signed_in: TestClient):
        body = {key: value for key, value in SAMPLE_GARMENT.items() if key != "color"}
        response = signed_in.post("/api/v1/garments", json=body, headers=TEST_HEADERS)
        assert response.json()["color"] == "Multi"

    def test_date_added_defaults_to_utc_today(self, signed_in: TestClient):
        body = {key: value for key, value in SAMPLE_GARMENT.items() if key != "date_added"}
        with patch(
            "gated.api.routes.garments.today", return_value=date(2025, 1, 1)
        ):
            response = signed_in.post(
                "/api/v1/garments", json=body, headers=TEST_HEADERS
            )
        assert response.json()["date_added"] == "2025-01-01"

    def test_invalid_category(self, signed_in: TestClient):
        body = dict(SAMPLE_GARMENT, category="Hats")
        response = signed_in.post("/api/v1/garments", json=body, headers=TEST_HEADERS)
        assert response.status_code == 422

    def test_delete_garment(self, signed_in: TestClient):
        signed_in.post("/api/v1/garments", json=SAMPLE_GARMENT, headers=TEST_HEADERS)
        signed_in.post("/api/v1/session/refresh", headers=TEST_HEADERS)
        garment_id = signed_in.get("/api/v1/garments", headers=TEST_HEADERS).json()[0][
            "id"
        ]

        response = signed_in.delete(
            f"/api/v1/garments/{garment_id}", headers=TEST_HEADERS
        )

        assert response.status_code == 204
        assert signed_in.get("/api/v1/garments", headers=TEST_HEADERS).json() == []

    def test_delete_unknown_garment_is_noop(self, signed_in: TestClient):
        response = signed_in.delete("/api/v1/garments/nope", headers=TEST_HEADERS)
        assert response.status_code == 204


class TestOrders:
    """Tests for order tracking endpoints"""

    def test_unconfigured_webhook_simulates(self, signed_in: TestClient):
        response = signed_in.post(
            "/api/v1/orders",
            json={"tracking_number": "1Z999AA10123456784", "item_name": "Yeezy"},
            headers=TEST_HEADERS,
        )

        assert response.status_code == 202
        data = response.json()
        assert data["simulated"] is True
        assert data["notice"] is None
        order = data["order"]
        assert order["carrier"] == "UPS"
        assert order["status"] == "Pre-Transit"
        assert SIMULATED_MARKER in order["history"][0]["description"]
        assert is_temporary_id(order["id"])

    def test_webhook_failure_degrades_with_notice(self, signed_in: TestClient):
        signed_in.put(
            "/api/v1/settings/tracking-webhook",
            json={"url": "hooks.example.com/track"},
        )

        with patch("gated.tracking.ingestor.requests.post") as mock_post:
            mock_post.return_value = Mock(
                ok=False, status_code=500, reason="Internal Server Error"
            )
            response = signed_in.post(
                "/api/v1/orders",
                json={
                    "carrier": "USPS",
                    "tracking_number": "9400",
                    "item_name": "Socks",
                },
                headers=TEST_HEADERS,
            )

        assert response.status_code == 202
        data = response.json()
        assert data["simulated"] is True
        assert data["notice"]["message"] == DEGRADED_NOTICE
        assert mock_post.call_args.args[0] == "https://hooks.example.com/track"

    def test_live_tracking(self, signed_in: TestClient):
        signed_in.put(
            "/api/v1/settings/tracking-webhook",
            json={"url": "https://hooks.example.com/track"},
        )

        with patch("gated.tracking.ingestor.requests.post") as mock_post:
            mock_post.return_value = Mock(
                ok=True,
                status_code=200,
                json=Mock(
                    return_value={
                        "status": "delivered",
                        "est_delivery_date": "June 12, 2025",
                        "tracking_details": [
                            {
                                "datetime": "2025-06-12T17:00:00Z",
                                "message": "Delivered, Front Door",
                            }
                        ],
                    }
                ),
            )
            response = signed_in.post(
                "/api/v1/orders",
                json={"carrier": "FedEx", "tracking_number": "7777", "item_name": "Jacket"},
                headers=TEST_HEADERS,
            )

        data = response.json()
        assert data["simulated"] is False
        assert data["order"]["status"] == "Delivered"
        assert data["order"]["estimated_delivery"] == "June 12, 2025"

        signed_in.post("/api/v1/session/refresh", headers=TEST_HEADERS)
        orders = signed_in.get("/api/v1/orders", headers=TEST_HEADERS).json()
        assert len(orders) == 1
        assert orders[0]["history"][0]["description"] == "Delivered, Front Door"


class TestDrops:
    """Tests for drop endpoints"""

    def test_add_drop_defaults(self, signed_in: TestClient):
        response = signed_in.post(
            "/api/v1/drops",
            json={"name": "Week 1", "date": "2025-08-21"},
            headers=TEST_HEADERS,
        )

        assert response.status_code == 202
        data = response.json()
        assert data["brand"] == "Unknown Brand"
        assert data["time"] == "12:00 PM EST"
        assert data["notified"] is True

    def test_drop_time_reloads_as_same_instant_in_utc(self, signed_in: TestClient):
        signed_in.post(
            "/api/v1/drops",
            json={
                "brand": "Supreme",
                "name": "Week 1",
                "date": "2025-08-21",
                "time": "11:00 AM EST",
            },
            headers=TEST_HEADERS,
        )
        signed_in.post("/api/v1/session/refresh", headers=TEST_HEADERS)

        drops = signed_in.get("/api/v1/drops", headers=TEST_HEADERS).json()
        assert drops[0]["time"] == "03:00 PM UTC"
        assert drops[0]["date"] == "2025-08-21"


class TestSettings:
    """Tests for local settings endpoints"""

    def test_webhook_round_trip(self, client: TestClient):
        assert client.get("/api/v1/settings/tracking-webhook").json() == {"url": None}

        response = client.put(
            "/api/v1/settings/tracking-webhook", json={"url": " hooks.example.com "}
        )
        assert response.json() == {"url": "https://hooks.example.com"}

        response = client.put("/api/v1/settings/tracking-webhook", json={"url": ""})
        assert response.json() == {"url": None}


class TestNotices:
    """Tests for the notices endpoint"""

    def test_notices_drain(self, signed_in: TestClient):
        response = signed_in.get("/api/v1/notices", headers=TEST_HEADERS)
        assert response.status_code == 200
        assert response.json() == []
