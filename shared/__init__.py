"""
Shared utilities for iothrottle.

This package aggregates the ambient building blocks consumed by the
throttling core:

- config: Library settings via pydantic-settings
- logging: Structured logging with component correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses

Do not import from iothrottle into shared/.
"""
