"""
Rate-limited writer.
"""

from typing import Optional

from .stream import ThrottledStream


class RateWriter(ThrottledStream):
    """Wraps a writable stream so it writes no more than ``rate`` bytes per second.

    Each write sleeps until the whole buffer may legally go out, then hands it
    to the wrapped stream in one call. A short write is returned as-is.
    """

    direction = "write"

    def writable(self) -> bool:
        return True

    def write(self, data) -> Optional[int]:
        """Wait for budget, then write ``data`` to the wrapped stream."""
        try:
            self._wait(memoryview(data).nbytes)
            written = self._stream.write(data)
        finally:
            self._last_op = self._now()

        if written:
            self._metrics.record_transfer(self.direction, written)
        return written

    def flush(self) -> None:
        flush = getattr(self._stream, "flush", None)
        if callable(flush):
            flush()

    def _wait(self, n: int) -> None:
        # Block until n bytes at self._rate have elapsed since the last write.
        delay = self._last_op + n / self._rate - self._now()
        if delay > 0:
            self._sleep(delay)
            self._metrics.record_wait(self.direction, delay)
