"""
Application configuration using Pydantic Settings.

Provides centralized configuration for:
- Server bind settings (host, port)
- WeatherAPI credentials
- Upstream service URLs and the outbound HTTP timeout
- Logging and monitoring

All settings support environment variable overrides and .env file loading.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Variables are read without a prefix (PORT, WEATHER_API_KEY, ...) from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="CEP Weather API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="API version"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=8080,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # Upstream Services
    # =========================================================================

    weather_api_key: Optional[str] = Field(
        default=None,
        description="WeatherAPI key; checked per request, not at startup"
    )
    cep_api_base_url: str = Field(
        default="https://viacep.com.br",
        description="ViaCEP base URL"
    )
    weather_api_base_url: str = Field(
        default="https://api.weatherapi.com",
        description="WeatherAPI base URL"
    )
    http_timeout_seconds: float = Field(
        default=300.0,
        description="Total timeout for each outbound call (seconds)",
        gt=0
    )
    http_pool_size: int = Field(
        default=100,
        description="Max simultaneous outbound connections",
        gt=0
    )

    # =========================================================================
    # Logging and Monitoring
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("port", mode="before")
    @classmethod
    def default_empty_port(cls, v):
        """Treat an empty PORT as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return 8080
        return v

    @field_validator("weather_api_key", mode="before")
    @classmethod
    def empty_key_is_none(cls, v):
        """Treat an empty or blank WEATHER_API_KEY as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cep_api_base_url", "weather_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got: {v}")
        return v_lower

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def weather_api_configured(self) -> bool:
        """Check if a WeatherAPI key is available."""
        return bool(self.weather_api_key)

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once and shared
    across the application.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
