"""
Health endpoints.

Key behaviors:
- /healthz: Overall status of all registered checks
- /healthz/ready: Readiness probe (rules loaded)
- /healthz/live: Liveness probe (process alive)

Paths use the ``/healthz`` prefix by default and are registered ahead of
the catch-all redirect route. Legacy URLs under the prefix are therefore
answered by these endpoints and never resolved; pick a different prefix
when the old site used ``/healthz``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

HEALTH_PREFIX = "/healthz"

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
    details: dict[str, Any] = field(default_factory=dict)


class HealthCheck(Protocol):
    """Protocol for health checks."""

    name: str

    def check(self) -> CheckResult:
        """Run the health check and return result."""
        ...


# --- Startup Tracker ---


class StartupTracker:
    """Tracks application startup time for uptime calculation."""

    def __init__(self) -> None:
        self._start_time: float | None = None

    def mark_started(self) -> None:
        """Mark the application as started."""
        self._start_time = time.time()

    def get_uptime_seconds(self) -> float:
        """Get uptime in seconds since start."""
        if self._start_time is None:
            return 0.0
        return time.time() - self._start_time

    def is_started(self) -> bool:
        """Check if application has been marked as started."""
        return self._start_time is not None


# --- Health Check Registry ---


class HealthCheckRegistry:
    """Registry of health checks to run."""

    def __init__(self) -> None:
        self._checks: list[HealthCheck] = []

    def register(self, check: HealthCheck) -> None:
        """Register a health check."""
        self._checks.append(check)

    def run_all(self) -> list[CheckResult]:
        """Run all registered checks."""
        return [check.check() for check in self._checks]


# --- Built-in Checks ---


class ProcessCheck:
    """Basic process liveness check."""

    name = "process"

    def check(self) -> CheckResult:
        return CheckResult(
            name=self.name,
            status=HealthStatus.HEALTHY,
            message="Process is running",
        )


class RulesLoadedCheck:
    """Check that redirect rules have been loaded into a resolver."""

    name = "rules"

    def __init__(self, get_resolver: Callable[[], Any]) -> None:
        self._get_resolver = get_resolver

    def check(self) -> CheckResult:
        resolver = self._get_resolver()
        if resolver is None:
            return CheckResult(
                name=self.name,
                status=HealthStatus.UNHEALTHY,
                message="Redirect rules not loaded",
            )
        return CheckResult(
            name=self.name,
            status=HealthStatus.HEALTHY,
            message="Redirect rules loaded",
            details={
                "exact": len(resolver.exact_rules),
                "gone": len(resolver.gone_rules),
                "pattern": len(resolver.pattern_rules),
                "status_code": int(resolver.permanent_code),
            },
        )


# --- FastAPI Router ---


def create_health_router(
    registry: HealthCheckRegistry,
    tracker: StartupTracker,
    version: str = "0.0.0",
    prefix: str = HEALTH_PREFIX,
) -> APIRouter:
    """
    Create FastAPI router for health endpoints.

    Args:
        registry: Health checks to run
        tracker: Startup tracker for uptime
        version: Application version string
        prefix: Path prefix of the health endpoints

    Returns:
        FastAPI router with health endpoints
    """
    router = APIRouter(prefix=prefix, tags=["health"])

    @router.get(
        "",
        response_model=None,
        responses={
            200: {"description": "Service is healthy"},
            503: {"description": "Service is unhealthy"},
        },
    )
    def health_check() -> JSONResponse:
        """Overall status based on all registered checks."""
        results = registry.run_all()
        healthy = all(r.status == HealthStatus.HEALTHY for r in results)
        overall = HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY

        response = {
            "status": overall.value,
            "version": version,
            "uptime_seconds": tracker.get_uptime_seconds(),
            "checks": [
                {
                    "name": r.name,
                    "status": r.status.value,
                    "message": r.message,
                    "details": r.details,
                }
                for r in results
            ],
        }
        status_code = status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=response, status_code=status_code)

    @router.get(
        "/ready",
        response_model=None,
        responses={
            200: {"description": "Service is ready to accept traffic"},
            503: {"description": "Service is not ready"},
        },
    )
    def readiness_check() -> JSONResponse:
        """Readiness probe; all checks must pass."""
        results = registry.run_all()
        is_ready = all(r.status == HealthStatus.HEALTHY for r in results)

        response = {
            "ready": is_ready,
            "checks": [
                {"name": r.name, "status": r.status.value, "message": r.message} for r in results
            ],
        }
        status_code = status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=response, status_code=status_code)

    @router.get("/live", response_model=None)
    def liveness_check() -> JSONResponse:
        """Liveness probe; always 200 while the process responds."""
        return JSONResponse(
            content={"alive": True, "uptime_seconds": tracker.get_uptime_seconds()},
            status_code=status.HTTP_200_OK,
        )

    return router
