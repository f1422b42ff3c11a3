"""
Configuration settings for the Platform Provider.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Provider settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Platform Provider"
    APP_VERSION: str = "1.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Platform API ===
    PLATFORM_API: str = ""
    PLATFORM_USERNAME: Optional[str] = None
    PLATFORM_PASSWORD: Optional[str] = None
    PLATFORM_INSECURE: bool = False  # Skip TLS verification (self-signed test stacks only)

    # === HTTP Transport ===
    HTTP_TIMEOUT: float = 60.0  # seconds, per request
    HTTP_CONNECT_TIMEOUT: float = 30.0
    HTTP_MAX_CONNECTIONS: int = 5  # Platform enforces per-client concurrency limits
    HTTP_KEEPALIVE_EXPIRY: float = 90.0

    # === Rate Limiting (HTTP 429) ===
    RATE_LIMIT_RETRIES: int = 5
    RATE_LIMIT_DEFAULT_DELAY: float = 1.0  # Used when Retry-After is missing or invalid
    RATE_LIMIT_JITTER: float = 5.0  # Max random extra seconds per retry

    # === Status Polling ===
    RETRY_INITIAL_DELAY: float = 0.5
    RETRY_MAX_DELAY: float = 5.0
    RETRY_BACKOFF_FACTOR: float = 2.0
    RETRY_MAX_DURATION: float = 1200.0  # 20 minutes
    RETRY_MAX_ATTEMPTS: int = 0  # 0 = bounded by duration only


# Global settings instance
settings = Settings()
