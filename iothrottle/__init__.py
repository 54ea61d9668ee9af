"""
Rate-limited readers, writers and shared bandwidth pools.

- RateReader / RateWriter: wrap a stream so it moves no more than a fixed
  number of bytes per second (reads never block, writes block until allowed)
- copy: pump one stream into another in fixed chunks at a fixed cadence
- ReadPool / WritePool: admit new readers or writers against a shared total
"""

from shared.errors import InvalidRateError, PoolExhaustedError, ShortWriteError, ThrottleError

from .copier import CHUNK_SIZE, copy, effective_rate, tick_interval
from .pool import BandwidthPool, ReadPool, WritePool
from .rate import MIN_ALLOCATION, normalize_rate
from .reader import RateReader
from .writer import RateWriter

__all__ = [
    "BandwidthPool",
    "CHUNK_SIZE",
    "InvalidRateError",
    "MIN_ALLOCATION",
    "PoolExhaustedError",
    "RateReader",
    "RateWriter",
    "ReadPool",
    "ShortWriteError",
    "ThrottleError",
    "WritePool",
    "copy",
    "effective_rate",
    "normalize_rate",
    "tick_interval",
]
