"""
Health endpoints.

- /health: liveness. No dependency checks; answers while the process runs.
- /health/ready: readiness. Runs every registered dependency check
  (record store, mailing list) and answers 503 if any fails.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# --- Types ---


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)


class HealthCheck(Protocol):
    name: str

    def check(self) -> CheckResult:
        ...


# --- Startup Tracker ---


class StartupTracker:
    """Process start time, for uptime reporting."""

    def __init__(self) -> None:
        self._start_time: float | None = None

    def mark_started(self) -> None:
        self._start_time = time.time()

    def is_started(self) -> bool:
        return self._start_time is not None

    def uptime_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        return time.time() - self._start_time


# --- Registry ---


class HealthCheckRegistry:
    """Registry of dependency checks run by the readiness probe."""

    def __init__(self) -> None:
        self._checks: list[HealthCheck] = []

    def register(self, check: HealthCheck) -> None:
        self._checks.append(check)

    def run_all(self) -> list[CheckResult]:
        return [check.check() for check in self._checks]


# --- Built-in Checks ---


class StartupCheck:
    """Fails until the lifespan has finished starting the app."""

    name = "startup"

    def __init__(self, tracker: StartupTracker) -> None:
        self._tracker = tracker

    def check(self) -> CheckResult:
        if self._tracker.is_started():
            return CheckResult(
                name=self.name,
                status=HealthStatus.HEALTHY,
                message="Startup complete",
                details={"uptime_seconds": self._tracker.uptime_seconds()},
            )
        return CheckResult(
            name=self.name,
            status=HealthStatus.UNHEALTHY,
            message="Startup not complete",
        )


class DependencyCheck:
    """
    Times a connectivity callable.

    The callable signals failure by raising; any exception marks the
    dependency unhealthy. The exception text is logged and kept in
    ``details["error"]``; the message stays generic.
    """

    def __init__(self, name: str, check_fn: Callable[[], Any], label: str) -> None:
        self.name = name
        self._check_fn = check_fn
        self._label = label

    def check(self) -> CheckResult:
        start = time.time()
        try:
            self._check_fn()
        except Exception as e:
            logger.warning("Readiness check %s failed: %s", self.name, e)
            return CheckResult(
                name=self.name,
                status=HealthStatus.UNHEALTHY,
                message=f"{self._label} unavailable",
                latency_ms=(time.time() - start) * 1000,
                details={"error": str(e)},
            )
        return CheckResult(
            name=self.name,
            status=HealthStatus.HEALTHY,
            message=f"{self._label} reachable",
            latency_ms=(time.time() - start) * 1000,
        )


def database_check(ping: Callable[[], Any]) -> DependencyCheck:
    return DependencyCheck("database", ping, "Database")


def mailing_list_check(ping: Callable[[], Any]) -> DependencyCheck:
    return DependencyCheck("mailing_list", ping, "Mailing list")


# --- FastAPI Router ---


def _check_json(result: CheckResult, *, show_errors: bool) -> dict[str, Any]:
    body: dict[str, Any] = {
        "name": result.name,
        "status": result.status.value,
        "message": result.message,
        "latency_ms": result.latency_ms,
    }
    if show_errors and "error" in result.details:
        body["error"] = result.details["error"]
    return body


def create_health_router(
    *,
    environment: str,
    tracker: StartupTracker,
    registry: HealthCheckRegistry,
) -> APIRouter:
    """
    Create the health router.

    Args:
        environment: Deployment environment name reported by /health.
            Outside production, failed checks also report their error text.
        tracker: Startup tracker for uptime
        registry: Dependency checks for /health/ready

    Returns:
        FastAPI router with /health and /health/ready
    """
    router = APIRouter(tags=["health"])

    @router.get("/health", response_model=None)
    def liveness_check() -> JSONResponse:
        return JSONResponse(
            content={
                "status": HealthStatus.HEALTHY.value,
                "timestamp": datetime.now(UTC).isoformat(),
                "uptime": tracker.uptime_seconds(),
                "environment": environment,
            },
            status_code=status.HTTP_200_OK,
        )

    @router.get(
        "/health/ready",
        response_model=None,
        responses={
            200: {"description": "Service is ready to accept traffic"},
            503: {"description": "A dependency is unavailable"},
        },
    )
    def readiness_check() -> JSONResponse:
        results = registry.run_all()
        is_ready = all(r.status == HealthStatus.HEALTHY for r in results)
        show_errors = environment != "production"

        response = {
            "ready": is_ready,
            "status": (HealthStatus.HEALTHY if is_ready else HealthStatus.UNHEALTHY).value,
            "checks": [_check_json(r, show_errors=show_errors) for r in results],
        }
        status_code = status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=response, status_code=status_code)

    return router
