"""
Shared configuration management for iothrottle.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ThrottleSettings(BaseSettings):
    """Settings read from IOTHROTTLE_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="IOTHROTTLE_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Logging
    log_level: str = Field(default="info")
    log_json: bool = Field(default=True)

    # Bandwidth pools (bytes per second)
    pool_capacity: int = Field(default=1 << 20, gt=0)

    # Observability
    metrics_enabled: bool = Field(default=True)


def get_settings(**overrides) -> ThrottleSettings:
    """Get settings from the environment, with explicit overrides applied."""
    return ThrottleSettings(**overrides)
