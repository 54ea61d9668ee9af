"""
Common plumbing for rate-limited stream wrappers.
"""

import time
from typing import Any, Optional

from shared.metrics import ThrottleMetrics, get_metrics

from .rate import validate_rate


def fill_buffer(stream: Any, view: memoryview) -> Optional[int]:
    """Fill ``view`` from ``stream``, preferring ``readinto`` over ``read``."""
    readinto = getattr(stream, "readinto", None)
    if readinto is not None:
        return readinto(view)

    data = stream.read(len(view))
    if data is None:
        return None
    n = len(data)
    view[:n] = data
    return n


class ThrottledStream:
    """Base for RateReader and RateWriter.

    Tracks when the wrapped stream last moved bytes. Instances are meant
    for a single owner at a time.
    """

    direction = "none"

    def __init__(self, stream: Any, rate: int, metrics: Optional[ThrottleMetrics] = None):
        self._stream = stream
        self._rate = validate_rate(rate)
        self._last_op = self._now()
        self._closed = False
        self._metrics = metrics or get_metrics()

    @property
    def rate(self) -> int:
        """Bytes per second this wrapper is limited to."""
        return self._rate

    @property
    def stream(self) -> Any:
        """The wrapped stream."""
        return self._stream

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the wrapped stream if it can be closed.

        Only the first call reaches the wrapped stream.
        """
        if self._closed:
            return
        self._closed = True
        close = getattr(self._stream, "close", None)
        if callable(close):
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} rate={self._rate} stream={self._stream!r}>"

    @staticmethod
    def _now() -> float:
        return time.monotonic()

    @staticmethod
    def _sleep(seconds: float) -> None:
        time.sleep(seconds)
