"""
Throttled copy between two streams in fixed-size chunks.

Unlike RateReader/RateWriter, which account for elapsed time continuously,
copy() moves one CHUNK_SIZE buffer per tick of a fixed cadence. Burst size is
bounded by the chunk, but the cadence is quantized: the realized rate is
``(rate // CHUNK_SIZE) * CHUNK_SIZE`` bytes per second, so a rate that is not
a multiple of CHUNK_SIZE is undershot by up to ``CHUNK_SIZE - 1`` bytes per
second. Rates below CHUNK_SIZE cannot be expressed and are rejected.
"""

import time
from typing import Any, Optional

from shared.errors import InvalidRateError, ShortWriteError
from shared.logging import get_logger
from shared.metrics import ThrottleMetrics, get_metrics

from .rate import validate_rate
from .stream import fill_buffer

CHUNK_SIZE = 1 << 10

_NANOSECONDS = 1_000_000_000

logger = get_logger("iothrottle.copier")


def tick_interval(rate: int) -> float:
    """Seconds between chunks so that CHUNK_SIZE per tick approximates ``rate``."""
    ticks_per_second = validate_rate(rate) // CHUNK_SIZE
    if ticks_per_second == 0:
        raise InvalidRateError(rate, f"Rate must be at least {CHUNK_SIZE} bytes per second")
    interval_ns = _NANOSECONDS // ticks_per_second
    if interval_ns == 0:
        raise InvalidRateError(rate, f"Rate must be below {CHUNK_SIZE * _NANOSECONDS} bytes per second")
    return interval_ns / _NANOSECONDS


def effective_rate(rate: int) -> float:
    """Bytes per second copy() actually achieves for a requested ``rate``."""
    return CHUNK_SIZE / tick_interval(rate)


def _wait_for_tick(deadline: float, interval: float) -> float:
    """Sleep until ``deadline`` and return the next one.

    Ticks missed while the caller was busy are dropped, not replayed.
    """
    delay = deadline - time.monotonic()
    if delay > 0:
        time.sleep(delay)

    deadline += interval
    now = time.monotonic()
    if deadline < now:
        deadline = now
    return deadline


def copy(dst: Any, src: Any, rate: int, metrics: Optional[ThrottleMetrics] = None) -> int:
    """Copy from ``src`` to ``dst`` until end of stream at no more than ``rate`` bytes per second.

    Returns the number of bytes written. Raises ShortWriteError when ``dst``
    accepts fewer bytes than it was given; errors from either stream propagate
    unchanged.
    """
    interval = tick_interval(rate)
    metrics = metrics or get_metrics()

    buffer = bytearray(CHUNK_SIZE)
    view = memoryview(buffer)
    written = 0

    logger.debug("Throttled copy started", rate=rate, tick_interval=interval)

    deadline = time.monotonic() + interval
    try:
        while True:
            deadline = _wait_for_tick(deadline, interval)

            nr = fill_buffer(src, view)
            if nr is None:
                continue
            if nr == 0:
                break

            nw = dst.write(bytes(view[:nr])) or 0
            if nw > 0:
                written += nw
            if nw != nr:
                raise ShortWriteError(written, f"Short write: {nw} of {nr} bytes accepted")
    except Exception as e:
        logger.warning("Throttled copy failed", written=written, error=str(e))
        raise
    finally:
        metrics.record_transfer("copy", written)

    logger.debug("Throttled copy finished", written=written)
    return written
