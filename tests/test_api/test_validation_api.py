"""Tests for the validation API endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from mailscore.models import EmailStatus
from mailscore.services.email_validation import StoreUnavailableError

pytestmark = pytest.mark.asyncio


class TestValidateTemplate:
    """Tests for POST /api/validation/template."""

    async def test_valid_template(self, client: AsyncClient):
        """Should grade a compliant template as valid."""
        response = await client.post(
            "/api/validation/template",
            json={
                "subject": "Monthly update",
                "html_content": (
                    "<meta name='viewport'><p>company address</p><a>unsubscribe</a>"
                ),
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is True
        assert data["score"] == 100
        assert data["issues"] == []

    async def test_invalid_template(self, client: AsyncClient):
        """Missing fields are issues, reported with 200."""
        response = await client.post("/api/validation/template", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert "Subject line is required" in data["issues"]
        assert "HTML content is required" in data["issues"]


class TestValidateList:
    """Tests for POST /api/validation/list."""

    async def test_list_buckets(self, client: AsyncClient):
        """Should return the buckets and report."""
        response = await client.post(
            "/api/validation/list",
            json={"emails": ["a@example.org", "A@example.org", "bad", "x@mailinator.com"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] == ["a@example.org"]
        assert data["duplicates"] == ["a@example.org"]
        assert data["invalid"] == ["bad"]
        assert data["disposable"] == ["x@mailinator.com"]
        assert data["report"]["validity_rate"] == 25.0

    async def test_emails_must_be_a_list(self, client: AsyncClient):
        """A scalar emails field is rejected."""
        response = await client.post("/api/validation/list", json={"emails": "a@example.org"})

        assert response.status_code == 422


class TestDeliverability:
    """Tests for POST /api/validation/deliverability."""

    async def test_successful_probe(self, client: AsyncClient, mock_transport):
        """Should send and return the message id."""
        response = await client.post(
            "/api/validation/deliverability",
            json={"to": "user@gmail.com", "subject": "Hi", "html_content": "<p>x</p>"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message_id"] == "msg-123"
        assert data["checks"] == {"format": True, "domain": True, "mx": True, "smtp": True}
        mock_transport.send.assert_awaited_once()

    async def test_failed_probe_is_still_200(self, client: AsyncClient, mock_transport):
        """Gate failures are reported in the body, not as HTTP errors."""
        response = await client.post(
            "/api/validation/deliverability",
            json={"to": "not-an-email", "subject": "Hi", "html_content": "<p>x</p>"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "invalid format"
        mock_transport.send.assert_not_called()


class TestHealthMetrics:
    """Tests for GET /api/validation/health-metrics."""

    async def test_default_window(self, client: AsyncClient, make_sent_email):
        """Should aggregate the last 30 days by default."""
        await make_sent_email(status=EmailStatus.DELIVERED)

        response = await client.get("/api/validation/health-metrics")

        assert response.status_code == 200
        data = response.json()
        assert data["total_emails"] == 1
        assert data["delivered_rate"] == 100.0
        # Nobody opened: 100 - 10
        assert data["reputation_score"] == 90

    async def test_unknown_window(self, client: AsyncClient):
        """Windows other than 7d, 30d and 90d are rejected."""
        response = await client.get("/api/validation/health-metrics", params={"window": "1y"})

        assert response.status_code == 422

    async def test_store_unavailable(self, client: AsyncClient, sql_service):
        """Store failures answer 503."""
        sql_service.health.event_store = AsyncMock()
        sql_service.health.event_store.count_sent.side_effect = StoreUnavailableError("down")

        response = await client.get("/api/validation/health-metrics", params={"window": "7d"})

        assert response.status_code == 503


class TestQualityScore:
    """Tests for GET /api/validation/quality/{id}."""

    async def test_quality_score(self, client: AsyncClient, make_sent_email):
        """Should score a persisted email."""
        sent = await make_sent_email(status=EmailStatus.DELIVERED)

        response = await client.get(f"/api/validation/quality/{sent.id}")

        assert response.status_code == 200
        data = response.json()
        assert set(data["factors"]) == {"deliverability", "engagement", "content", "timing"}
        assert data["factors"]["deliverability"] == 80
        assert 0 <= data["score"] <= 100

    async def test_not_found(self, client: AsyncClient):
        """Unknown ids answer 404."""
        response = await client.get("/api/validation/quality/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Email not found"

    async def test_store_unavailable(self, client: AsyncClient, sql_service):
        """Store failures answer 503."""
        sql_service.quality.event_store = AsyncMock()
        sql_service.quality.event_store.get_sent_by_id.side_effect = ConnectionError("down")

        response = await client.get("/api/validation/quality/1")

        assert response.status_code == 503
