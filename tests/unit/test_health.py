"""
Tests for the health endpoints.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sjba_api.domain.errors import MailingListError, StoreError
from sjba_api.shell.http.health import (
    HealthCheckRegistry,
    HealthStatus,
    StartupCheck,
    StartupTracker,
    create_health_router,
    database_check,
    mailing_list_check,
)


@pytest.fixture
def tracker() -> StartupTracker:
    return StartupTracker()


@pytest.fixture
def registry() -> HealthCheckRegistry:
    return HealthCheckRegistry()


@pytest.fixture
def client(tracker: StartupTracker, registry: HealthCheckRegistry) -> TestClient:
    app = FastAPI()
    app.include_router(
        create_health_router(environment="test", tracker=tracker, registry=registry)
    )
    return TestClient(app)


def _fail() -> None:
    raise StoreError("database is locked")


def _provider_down() -> None:
    raise MailingListError("Mailchimp GET /ping returned 401: API Key Invalid", status=401)


class TestStartupTracker:
    def test_uptime_zero_before_start(self, tracker: StartupTracker) -> None:
        assert not tracker.is_started()
        assert tracker.uptime_seconds() == 0.0

    def test_started(self, tracker: StartupTracker) -> None:
        tracker.mark_started()
        assert tracker.is_started()
        assert tracker.uptime_seconds() >= 0.0


class TestChecks:
    def test_startup_check(self, tracker: StartupTracker) -> None:
        check = StartupCheck(tracker)
        assert check.check().status == HealthStatus.UNHEALTHY
        tracker.mark_started()
        assert check.check().status == HealthStatus.HEALTHY

    def test_dependency_ok(self) -> None:
        result = database_check(lambda: None).check()
        assert result.status == HealthStatus.HEALTHY
        assert result.name == "database"

    def test_dependency_failure(self) -> None:
        result = database_check(_fail).check()
        assert result.status == HealthStatus.UNHEALTHY
        assert result.message == "Database unavailable"
        assert result.details == {"error": "database is locked"}


class TestEndpoints:
    def test_liveness_ignores_dependencies(
        self, client: TestClient, registry: HealthCheckRegistry
    ) -> None:
        registry.register(database_check(_fail))
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "test"
        assert "timestamp" in body
        assert "uptime" in body

    def test_ready(
        self, client: TestClient, registry: HealthCheckRegistry, tracker: StartupTracker
    ) -> None:
        tracker.mark_started()
        registry.register(StartupCheck(tracker))
        registry.register(mailing_list_check(lambda: None))
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True
        assert [c["name"] for c in response.json()["checks"]] == ["startup", "mailing_list"]

    def test_not_ready(self, client: TestClient, registry: HealthCheckRegistry) -> None:
        registry.register(database_check(_fail))
        response = client.get("/health/ready")
        assert response.status_code == 503
        body = response.json()
        assert body["ready"] is False
        assert body["status"] == "unhealthy"

    def test_not_ready_reports_error_outside_production(
        self, client: TestClient, registry: HealthCheckRegistry
    ) -> None:
        registry.register(database_check(_fail))
        check = client.get("/health/ready").json()["checks"][0]
        assert check["message"] == "Database unavailable"
        assert check["error"] == "database is locked"

    def test_production_hides_error_text(
        self, tracker: StartupTracker, registry: HealthCheckRegistry
    ) -> None:
        app = FastAPI()
        app.include_router(
            create_health_router(environment="production", tracker=tracker, registry=registry)
        )
        registry.register(mailing_list_check(_provider_down))

        response = TestClient(app).get("/health/ready")

        assert response.status_code == 503
        check = response.json()["checks"][0]
        assert check["message"] == "Mailing list unavailable"
        assert "error" not in check
        assert "401" not in response.text
