"""
Rate normalization shared by readers, writers and pools.
"""

from shared.errors import InvalidRateError

# Don't allow allocations smaller than 1024 bytes per second; below that the
# bookkeeping costs more than it buys. Must be a power of two.
MIN_ALLOCATION = 1 << 10


def normalize_rate(rate: int) -> int:
    """Round a requested rate up to the next multiple of MIN_ALLOCATION.

    Non-positive requests are granted the minimum allocation.
    """
    if rate <= 0:
        return MIN_ALLOCATION
    remainder = rate & (MIN_ALLOCATION - 1)
    if remainder:
        return rate - remainder + MIN_ALLOCATION
    return rate


def validate_rate(rate: int) -> int:
    """Check that a rate handed directly to a wrapper is a positive integer."""
    if isinstance(rate, bool) or not isinstance(rate, int) or rate <= 0:
        raise InvalidRateError(rate, "Rate must be a positive number of bytes per second")
    return rate
