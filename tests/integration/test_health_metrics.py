"""Integration tests for /health, /healthz and /metrics endpoints."""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from manualbot.app.api.deps import get_session_store
from manualbot.app.dialogue.session_store import InMemorySessionStore
from manualbot.app.main import app
from manualbot.app.models.common import FlowName
from manualbot.app.models.session import FlowState


@pytest.fixture
def sessions() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def client(sessions: InMemorySessionStore) -> TestClient:
    """Create test client with an isolated session store."""
    app.dependency_overrides[get_session_store] = lambda: sessions
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_always_ok(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestHealthzEndpoint:
    """Test /healthz endpoint."""

    def test_healthz_reports_inmemory_store(self, client: TestClient) -> None:
        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["db"] == "inmemory"
        assert data["sessions"]["total_sessions"] == 0

    def test_healthz_includes_session_distribution(
        self, client: TestClient, sessions: InMemorySessionStore
    ) -> None:
        session = sessions.get("U1").model_copy(
            update={"flow": FlowState(name=FlowName.inquiry, step="writing_content")}
        )
        sessions.set("U1", session, timedelta(minutes=10))

        data = client.get("/healthz").json()

        assert data["sessions"]["total_sessions"] == 1
        assert data["sessions"]["distribution"] == {"inquiry:writing_content": 1}

    @patch("manualbot.app.api.routes.health.check_db")
    def test_healthz_returns_503_when_db_fails(
        self, mock_check_db: MagicMock, client: TestClient
    ) -> None:
        """Test /healthz returns 503 when DB check fails."""
        mock_check_db.return_value = (False, "connection refused")

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["db"] == "connection refused"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_returns_prometheus_format(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]

    def test_metrics_includes_dialogue_and_search_metrics(self, client: TestClient) -> None:
        """Counters show up once recorded."""
        from manualbot.app.utils.metrics import PrometheusDialogueMetrics

        metrics = PrometheusDialogueMetrics()
        metrics.record_transition("registration", "started")
        metrics.record_search("keyword", "hit", 3.2)

        text = client.get("/metrics").text

        assert 'dialogue_transitions_total{flow="registration",outcome="started"}' in text
        assert 'search_requests_total{kind="keyword",outcome="hit"}' in text
        assert "search_latency_ms_bucket" in text
