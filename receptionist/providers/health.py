"""
Provider Health Checks for Receptionist.

Runs the providers' own health_check() with a timeout and classifies the
outcome by latency. Only providers that are already loaded are checked;
a health check never forces lazy construction.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .base import Provider

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status for a provider."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class HealthCheckResult:
    """Result of a health check."""

    provider_name: str
    status: HealthStatus
    latency_ms: float | None = None
    message: str | None = None
    error: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_name": self.provider_name,
            "status": self.status.value,
            "latency_ms": self.latency_ms,
            "message": self.message,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }


class ProviderHealthChecker:
    """
    Health checker for loaded providers.

    Keeps the last result per provider name.
    """

    # Thresholds for health status
    LATENCY_DEGRADED_MS = 5000  # 5 seconds
    LATENCY_UNHEALTHY_MS = 30000  # 30 seconds

    def __init__(self, timeout_seconds: float = 10.0):
        self.timeout_seconds = timeout_seconds
        self._last_checks: dict[str, HealthCheckResult] = {}

    async def check(self, name: str, provider: Provider) -> HealthCheckResult:
        """
        Check health of one provider.

        Args:
            name: Registry name of the provider
            provider: Loaded provider instance

        Returns:
            HealthCheckResult (never raises)
        """
        start_time = time.perf_counter()

        try:
            healthy = await asyncio.wait_for(
                provider.health_check(),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            result = HealthCheckResult(
                provider_name=name,
                status=HealthStatus.UNHEALTHY,
                latency_ms=(time.perf_counter() - start_time) * 1000,
                error=f"Timeout after {self.timeout_seconds}s",
            )
        except Exception as e:
            result = HealthCheckResult(
                provider_name=name,
                status=HealthStatus.UNHEALTHY,
                latency_ms=(time.perf_counter() - start_time) * 1000,
                error=str(e),
            )
        else:
            latency_ms = (time.perf_counter() - start_time) * 1000
            if not healthy or latency_ms > self.LATENCY_UNHEALTHY_MS:
                status = HealthStatus.UNHEALTHY
            elif latency_ms > self.LATENCY_DEGRADED_MS:
                status = HealthStatus.DEGRADED
            else:
                status = HealthStatus.HEALTHY

            result = HealthCheckResult(
                provider_name=name,
                status=status,
                latency_ms=latency_ms,
                message="Provider is operational" if healthy else "Health check reported failure",
            )

        if result.status is HealthStatus.UNHEALTHY:
            logger.warning(f"[health] {name} is unhealthy: {result.error or result.message}")

        self._last_checks[name] = result
        return result

    def get_last_check(self, name: str) -> HealthCheckResult | None:
        return self._last_checks.get(name)

    def get_all_checks(self) -> list[HealthCheckResult]:
        return list(self._last_checks.values())

    def forget(self, name: str) -> None:
        self._last_checks.pop(name, None)

    def clear(self) -> None:
        self._last_checks.clear()


__all__ = [
    "HealthStatus",
    "HealthCheckResult",
    "ProviderHealthChecker",
]
