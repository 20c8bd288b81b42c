"""Backend configuration."""
from typing import List, Optional

from pydantic_settings import BaseSettings

from conditions_pipeline.config import (
    DEFAULT_TIMEZONE,
    DEFAULT_SUB_SOURCE,
    SUB_SOURCE_PRIORITY,
    MAX_FORECAST_DAYS,
    REQUEST_TIMEOUT,
)


class Settings(BaseSettings):
    """Application settings."""

    # API settings
    api_title: str = "Sea Kayaking Conditions API"
    api_version: str = "1.0.0"
    cors_origins: list = ["http://localhost:5173", "http://localhost:3000"]
    log_level: str = "INFO"

    # Provider credentials (Stormglass is optional; without it the free APIs are used)
    stormglass_api_key: Optional[str] = None
    worldtides_api_key: Optional[str] = None

    # Data settings
    timezone: str = DEFAULT_TIMEZONE
    preferred_sub_source: str = DEFAULT_SUB_SOURCE
    sub_source_priority: List[str] = SUB_SOURCE_PRIORITY
    max_forecast_days: int = MAX_FORECAST_DAYS
    request_timeout: float = REQUEST_TIMEOUT
    max_workers: int = 4

    class Config:
        env_prefix = "SEAKAYAK_"


settings = Settings()
