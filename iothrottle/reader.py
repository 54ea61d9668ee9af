"""
Rate-limited reader.
"""

import io
from typing import Optional

from .stream import ThrottledStream, fill_buffer


class RateReader(ThrottledStream):
    """Wraps a readable stream so it reads no more than ``rate`` bytes per second.

    Reads never block. Budget accrues continuously from the last read, so a
    reader that sat idle may return a large burst on its next call; the
    accrued credit is not capped.

    Like non-blocking raw I/O, ``readinto`` and ``read`` return ``None`` when
    nothing may be read yet and an empty result at end of stream.
    """

    direction = "read"

    def readable(self) -> bool:
        return True

    def available(self) -> int:
        """Bytes the next read may return, without consuming the budget."""
        return int((self._now() - self._last_op) * self._rate)

    def readinto(self, buffer) -> Optional[int]:
        """Read into ``buffer`` as much as the accrued budget allows."""
        view = memoryview(buffer).cast("B")
        if not len(view):
            return 0

        allowed = self.available()
        if allowed <= 0:
            return None

        try:
            n = fill_buffer(self._stream, view[:allowed])
        finally:
            self._last_op = self._now()

        if n:
            self._metrics.record_transfer(self.direction, n)
        return n

    def read(self, size: int = -1) -> Optional[bytes]:
        """Read up to ``size`` bytes.

        A negative size reads what the budget allows, at most
        io.DEFAULT_BUFFER_SIZE bytes per call.
        """
        if size == 0:
            return b""

        allowed = self.available()
        if allowed <= 0:
            return None
        if size is None or size < 0:
            size = io.DEFAULT_BUFFER_SIZE

        buffer = bytearray(min(size, allowed))
        n = self.readinto(buffer)
        if n is None:
            return None
        return bytes(buffer[:n])
