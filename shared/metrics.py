"""
Shared metrics configuration for iothrottle.
"""

import threading
from typing import Any, Dict, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge

from shared.config import ThrottleSettings, get_settings


class ThrottleMetrics:
    """Centralized metrics collector for throttled streams and pools."""

    def __init__(self, registry: Optional[CollectorRegistry] = None, enabled: bool = True):
        self.registry = registry
        self.enabled = enabled
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up throttle metrics."""
        self._metrics["bytes_transferred_total"] = Counter(
            "iothrottle_bytes_transferred_total",
            "Total bytes moved through throttled streams",
            ["direction"],
            registry=self.registry
        )

        self._metrics["throttle_wait_seconds_total"] = Counter(
            "iothrottle_throttle_wait_seconds_total",
            "Total time spent sleeping to honor a rate",
            ["direction"],
            registry=self.registry
        )

        self._metrics["pool_allocations_total"] = Counter(
            "iothrottle_pool_allocations_total",
            "Total pool allocation attempts",
            ["pool", "outcome"],
            registry=self.registry
        )

        self._metrics["pool_allocated_bytes_per_second"] = Gauge(
            "iothrottle_pool_allocated_bytes_per_second",
            "Bandwidth currently granted by a pool",
            ["pool"],
            registry=self.registry
        )

    def record_transfer(self, direction: str, nbytes: int):
        """Record bytes moved in one direction ("read", "write" or "copy")."""
        if self.enabled and nbytes > 0:
            self._metrics["bytes_transferred_total"].labels(direction=direction).inc(nbytes)

    def record_wait(self, direction: str, seconds: float):
        """Record time spent pacing."""
        if self.enabled and seconds > 0:
            self._metrics["throttle_wait_seconds_total"].labels(direction=direction).inc(seconds)

    def record_allocation(self, pool: str, outcome: str):
        """Record an allocation attempt ("granted" or "rejected")."""
        if self.enabled:
            self._metrics["pool_allocations_total"].labels(pool=pool, outcome=outcome).inc()

    def adjust_pool_allocated(self, pool: str, delta: int):
        """Move the bandwidth granted under a pool name by ``delta``.

        Pools sharing a name add up under one label.
        """
        if self.enabled:
            self._metrics["pool_allocated_bytes_per_second"].labels(pool=pool).inc(delta)


_default_metrics: Optional[ThrottleMetrics] = None
_default_lock = threading.Lock()


def get_metrics(settings: Optional[ThrottleSettings] = None) -> ThrottleMetrics:
    """Get the process-wide collector registered on the default registry."""
    global _default_metrics
    with _default_lock:
        if _default_metrics is None:
            settings = settings or get_settings()
            _default_metrics = ThrottleMetrics(registry=REGISTRY, enabled=settings.metrics_enabled)
        return _default_metrics
