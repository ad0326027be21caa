"""Configuration management using pydantic-settings."""
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:4201",
    "http://localhost:8080",
    "https://dashboard.novu-staging.co",
    "https://dashboard.novu.co",
    "https://eu.dashboard.novu.co",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Novu API configuration
    novu_secret_key: Optional[str] = None
    novu_base_url: str = "https://api.novu.co/v2"
    upstream_timeout_seconds: float = 30.0

    # Cache settings (same TTL for the list and detail spaces)
    workflows_cache_ttl_seconds: int = 300

    # Max concurrent detail lookups during list fan-out
    detail_max_workers: int = Field(10, ge=1)

    # CORS
    cors_allowed_origins: List[str] = DEFAULT_ALLOWED_ORIGINS

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
