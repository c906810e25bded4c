"""
Tests for the HTTP surface
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from helpdesk_engine.api.app import app
from helpdesk_engine.config import get_settings
from helpdesk_engine.repositories import (
    MemoryLedgerRepository,
    MemoryTaskRepository,
    MemoryTicketRepository,
    MemoryUserDirectory,
)

from tests.conftest import make_closed, make_task, make_ticket


@pytest.fixture
def client(settings, users):
    now = datetime.now(timezone.utc)
    today = now.date()

    app.state.tickets = MemoryTicketRepository([
        make_closed("t1", now - timedelta(hours=60), hours=50, assigned_to="alice"),
        make_ticket("t2", now - timedelta(hours=2), assigned_to="alice"),
        make_ticket("t3", now - timedelta(hours=1), assigned_to="bob"),
    ])
    app.state.tasks = MemoryTaskRepository([make_task("k1", "alice", due_date=today)])
    app.state.users = MemoryUserDirectory(users)
    app.state.ledgers = MemoryLedgerRepository()
    app.state.notification_stores = {}
    app.dependency_overrides[get_settings] = lambda: settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestMetricsEndpoints:

    def test_default_month_metrics(self, client):
        response = client.get("/metrics")

        assert response.status_code == 200
        body = response.json()
        assert body["window"]["granularity"] == "monthly"
        assert len(body["series"]) == 12
        assert body["overall_resolution_hours"] == 50.0
        assert body["summary"]["opened_total"] == 3

    def test_custom_range_end_before_start_is_400(self, client):
        response = client.get(
            "/metrics",
            params={"time_range": "custom", "start": "2024-05-10", "end": "2024-05-01"},
        )

        assert response.status_code == 400

    def test_custom_range_at_end_of_calendar_is_400(self, client):
        response = client.get(
            "/metrics",
            params={"time_range": "custom", "start": "9999-01-01", "end": "9999-12-31"},
        )

        assert response.status_code == 400

    def test_unknown_type_is_422(self, client):
        response = client.get("/metrics", params={"type": "not_a_type"})

        assert response.status_code == 422

    def test_type_filter(self, client):
        response = client.get("/metrics", params={"type": "collections"})

        assert response.status_code == 200
        assert response.json()["summary"]["opened_total"] == 0

    def test_export_is_an_attachment(self, client):
        response = client.get("/metrics/export", params={"time_range": "week"})

        assert response.status_code == 200
        assert "attachment" in response.headers["content-disposition"]
        assert "ticket-statistics-" in response.headers["content-disposition"]
        assert response.json()["window"]["granularity"] == "weekly"


class TestNotificationEndpoints:

    def test_feed_refreshes_and_lists(self, client):
        response = client.get("/users/alice/notifications")

        assert response.status_code == 200
        body = response.json()
        assert sorted(e["id"] for e in body["events"]) == [
            "assignment:t1", "assignment:t2", "task:k1"
        ]
        assert body["unread_count"] == 3
        assert body["persisted"] is True

    def test_feed_does_not_duplicate(self, client):
        client.get("/users/alice/notifications")
        body = client.get("/users/alice/notifications").json()

        assert len(body["events"]) == 3

    def test_mark_read_and_read_all(self, client):
        client.get("/users/alice/notifications")

        body = client.post("/users/alice/notifications/assignment:t1/read").json()
        assert body["unread_count"] == 2

        body = client.post("/users/alice/notifications/read-all").json()
        assert body["unread_count"] == 0

    def test_clear_one_and_clear_all(self, client):
        client.get("/users/alice/notifications")

        body = client.delete("/users/alice/notifications/assignment:t2").json()
        assert sorted(e["id"] for e in body["events"]) == ["assignment:t1", "task:k1"]

        body = client.delete("/users/alice/notifications").json()
        assert body["events"] == []

        body = client.get("/users/alice/notifications").json()
        assert [e["id"] for e in body["events"]] == ["task:k1"]

    def test_store_cache_evicts_least_recently_used(self, client, settings):
        app.dependency_overrides[get_settings] = lambda: settings.model_copy(
            update={"NOTIFICATION_STORE_CACHE_SIZE": 1}
        )

        client.get("/users/alice/notifications")
        client.post("/users/alice/notifications/assignment:t1/read")
        client.get("/users/bob/notifications")

        assert list(app.state.notification_stores) == ["bob"]

        body = client.get("/users/alice/notifications").json()
        assert len(body["events"]) == 3
        assert body["unread_count"] == 2
        assert list(app.state.notification_stores) == ["alice"]
