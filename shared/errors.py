"""
Shared error handling for iothrottle.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class ThrottleError(Exception):
    """Base exception for iothrottle."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class PoolExhaustedError(ThrottleError):
    """The pool could not allocate enough bandwidth for the request."""

    def __init__(self, message: str = "Insufficient capacity to allocate new reader or writer",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__("POOL_EXHAUSTED", message, details)


class ShortWriteError(ThrottleError):
    """A write accepted fewer bytes than it was given."""

    def __init__(self, written: int, message: str = "Short write", details: Optional[Dict[str, Any]] = None):
        self.written = written
        details = dict(details or {})
        details.setdefault("written", written)
        super().__init__("SHORT_WRITE", message, details)


class InvalidRateError(ThrottleError, ValueError):
    """A rate that cannot be honored."""

    def __init__(self, rate: Any, message: str = "Invalid rate", details: Optional[Dict[str, Any]] = None):
        self.rate = rate
        details = dict(details or {})
        details.setdefault("rate", rate)
        super().__init__("INVALID_RATE", f"{message}: {rate!r}", details)
