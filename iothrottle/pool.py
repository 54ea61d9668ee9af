"""
Bandwidth pools that hand out rate-limited readers and writers.

A pool holds a fixed total rate. Each allocation carves a normalized share
out of it and hands back a wrapper running at that share; releasing the
wrapper gives the share back. Allocation never queues: when the pool cannot
cover a request it raises PoolExhaustedError and the caller decides whether
to retry later or ask for less.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Type

from shared.config import ThrottleSettings, get_settings
from shared.errors import PoolExhaustedError
from shared.logging import get_logger
from shared.metrics import ThrottleMetrics, get_metrics

from .rate import normalize_rate
from .reader import RateReader
from .stream import ThrottledStream
from .writer import RateWriter


class BandwidthPool:
    """Shared capacity ledger for throttled streams.

    All accounting (capacity check, registration, release) happens under a
    single lock so that two allocations can never both see the same headroom.
    """

    kind = "bandwidth"
    wrapper_class: Optional[Type[ThrottledStream]] = None

    def __init__(self, capacity: int, name: Optional[str] = None, metrics: Optional[ThrottleMetrics] = None,
                 wrapper_class: Optional[Type[ThrottledStream]] = None):
        self.wrapper_class = wrapper_class or self.wrapper_class
        if self.wrapper_class is None:
            raise TypeError(f"{type(self).__name__} needs a wrapper_class")
        self._capacity = normalize_rate(capacity)
        self.name = name or self.kind
        self.logger = get_logger("iothrottle.pool")
        self._metrics = metrics or get_metrics()

        self._lock = threading.Lock()
        self._allocated = 0
        self._members: Dict[ThrottledStream, int] = {}

    @classmethod
    def from_settings(cls, settings: Optional[ThrottleSettings] = None, **kwargs) -> "BandwidthPool":
        """Create a pool sized by ``settings.pool_capacity``."""
        settings = settings or get_settings()
        return cls(settings.pool_capacity, **kwargs)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def allocated(self) -> int:
        with self._lock:
            return self._allocated

    @property
    def available(self) -> int:
        """Bandwidth still free for new allocations."""
        with self._lock:
            return self._capacity - self._allocated

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)

    def __contains__(self, wrapper: object) -> bool:
        with self._lock:
            return wrapper in self._members

    def allocate(self, stream: Any, rate: int) -> ThrottledStream:
        """Wrap ``stream`` at ``rate`` (normalized) if the pool has room for it."""
        rate = normalize_rate(rate)

        with self._lock:
            if self._capacity - self._allocated < rate:
                self._metrics.record_allocation(self.name, "rejected")
                self.logger.warning(
                    "Pool exhausted",
                    pool=self.name,
                    requested=rate,
                    capacity=self._capacity,
                    allocated=self._allocated
                )
                raise PoolExhaustedError(details={
                    "pool": self.name,
                    "requested": rate,
                    "capacity": self._capacity,
                    "allocated": self._allocated
                })

            wrapper = self.wrapper_class(stream, rate, metrics=self._metrics)
            self._members[wrapper] = rate
            self._allocated += rate
            allocated = self._allocated
            self._metrics.adjust_pool_allocated(self.name, rate)

        self._metrics.record_allocation(self.name, "granted")
        self.logger.debug(
            "Bandwidth allocated",
            pool=self.name,
            rate=rate,
            allocated=allocated,
            capacity=self._capacity
        )
        return wrapper

    def release(self, wrapper: ThrottledStream) -> None:
        """Return a wrapper's share to the pool.

        Releasing a wrapper this pool does not know, or one already
        released, does nothing. The wrapper itself is left open.
        """
        with self._lock:
            rate = self._members.pop(wrapper, None)
            if rate is None:
                return
            self._allocated -= rate
            allocated = self._allocated
            self._metrics.adjust_pool_allocated(self.name, -rate)

        self.logger.debug("Bandwidth released", pool=self.name, rate=rate, allocated=allocated)

    @contextmanager
    def lease(self, stream: Any, rate: int) -> Iterator[ThrottledStream]:
        """Allocate a wrapper for the duration of a ``with`` block."""
        wrapper = self.allocate(stream, rate)
        try:
            yield wrapper
        finally:
            self.release(wrapper)

    def get_pool_stats(self) -> Dict[str, Any]:
        """Get pool statistics."""
        with self._lock:
            return {
                "pool": self.name,
                "capacity": self._capacity,
                "allocated": self._allocated,
                "available": self._capacity - self._allocated,
                "members": len(self._members)
            }

    def __repr__(self) -> str:
        stats = self.get_pool_stats()
        return f"<{type(self).__name__} {stats['pool']} {stats['allocated']}/{stats['capacity']} B/s>"


class ReadPool(BandwidthPool):
    """Bandwidth shared between RateReaders."""

    kind = "read"
    wrapper_class = RateReader

    def new_reader(self, stream: Any, rate: int) -> RateReader:
        """Allocate a RateReader over ``stream`` from the pool."""
        return self.allocate(stream, rate)

    def release_reader(self, reader: RateReader) -> None:
        """Release a reader as soon as it is no longer required."""
        self.release(reader)


class WritePool(BandwidthPool):
    """Bandwidth shared between RateWriters."""

    kind = "write"
    wrapper_class = RateWriter

    def new_writer(self, stream: Any, rate: int) -> RateWriter:
        """Allocate a RateWriter over ``stream`` from the pool."""
        return self.allocate(stream, rate)

    def release_writer(self, writer: RateWriter) -> None:
        """Release a writer as soon as it is no longer required."""
        self.release(writer)
