"""
Configuration Management Module

This module handles loading, validating, and providing access to application configuration
from environment variables (.env file).

Uses Pydantic Settings for automatic validation and type conversion.

Key Features:
- Loads configuration from .env file
- Validates all required settings
- Provides type-safe access to configuration values
- Converts comma-separated strings to lists (exchanges, CORS origins)
- Builds an explicit VenueConfig per exchange for the adapters

Usage:
    from core.config import settings

    print(settings.exchanges_list)          # ['binance', 'okx', 'bybit']
    print(settings.venue_config("okx"))     # VenueConfig(name='okx', ...)
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_EXCHANGES = ("binance", "okx", "bybit")


class VenueConfig(BaseModel):
    """
    Connection settings handed to a single venue adapter.

    Attributes:
        name: Venue identifier ("binance", "okx", "bybit")
        base_url: REST base URL (spot endpoints for Binance)
        futures_base_url: Separate derivatives base URL (Binance only)
        api_key: Optional API key sent as a header when non-empty
        timeout: Per-request timeout in seconds
        funding_limit: Maximum funding-rate rows taken from this venue
    """

    model_config = ConfigDict(frozen=True)

    name: str
    base_url: str
    futures_base_url: Optional[str] = None
    api_key: str = ""
    timeout: float = Field(default=10.0, gt=0)
    funding_limit: int = Field(default=100, ge=1)


class Settings(BaseSettings):
    """
    Application Settings

    Values are automatically loaded from environment variables or .env file.

    Attributes:
        binance_spot_base_url: Binance spot API base URL
        binance_futures_base_url: Binance USD-M futures API base URL
        okx_base_url: OKX API base URL
        bybit_base_url: Bybit API base URL
        binance_api_key / okx_api_key / bybit_api_key: Optional keys (public endpoints work without)
        enabled_exchanges: Comma-separated venues, in the order they are aggregated
        request_timeout: Timeout for each outbound HTTP request in seconds
        max_opportunities: Maximum number of ranked opportunities returned
        funding_rates_per_exchange: Maximum funding-rate rows taken from each venue
        cache_max_age: Advisory Cache-Control max-age for query responses
        app_host / app_port: Server bind address
        environment: Current environment (development, production)
        debug: Enable debug mode
        log_level: Logging level
        cors_origins: Comma-separated allowed CORS origins
    """

    # ============================================
    # Exchange API Configuration
    # ============================================

    binance_spot_base_url: str = Field(
        default="https://api.binance.com",
        description="Binance spot API base URL"
    )

    binance_futures_base_url: str = Field(
        default="https://fapi.binance.com",
        description="Binance USD-M futures API base URL"
    )

    okx_base_url: str = Field(
        default="https://www.okx.com",
        description="OKX API base URL"
    )

    bybit_base_url: str = Field(
        default="https://api.bybit.com",
        description="Bybit API base URL"
    )

    binance_api_key: str = Field(
        default="",
        description="Binance API key (optional for public endpoints)"
    )

    okx_api_key: str = Field(
        default="",
        description="OKX API key (optional for public endpoints)"
    )

    bybit_api_key: str = Field(
        default="",
        description="Bybit API key (optional for public endpoints)"
    )

    enabled_exchanges: str = Field(
        default="binance,okx,bybit",
        description="Comma-separated list of venues to aggregate (order matters)"
    )

    # ============================================
    # Scanner Configuration
    # ============================================

    request_timeout: float = Field(
        default=10.0,
        description="HTTP request timeout in seconds"
    )

    max_opportunities: int = Field(
        default=100,
        description="Maximum number of ranked opportunities per response"
    )

    funding_rates_per_exchange: int = Field(
        default=100,
        description="Maximum funding-rate entries taken from each exchange"
    )

    cache_max_age: int = Field(
        default=30,
        description="Advisory Cache-Control max-age (seconds) for query responses"
    )

    # ============================================
    # Application Configuration
    # ============================================

    app_host: str = Field(
        default="0.0.0.0",
        description="FastAPI server host address"
    )

    app_port: int = Field(
        default=8000,
        description="FastAPI server port"
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, production)"
    )

    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False
    )

    # ============================================
    # Derived Properties
    # ============================================

    @property
    def exchanges_list(self) -> List[str]:
        """
        Convert comma-separated exchanges string to a list.

        Example:
            >>> settings.exchanges_list
            ['binance', 'okx', 'bybit']
        """
        return [e.strip().lower() for e in self.enabled_exchanges.split(",") if e.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated CORS origins string to a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def venue_config(self, name: str) -> VenueConfig:
        """
        Build the explicit configuration for one venue adapter.

        Args:
            name: Venue identifier (case-insensitive)

        Returns:
            VenueConfig with URLs, optional API key and timeout

        Raises:
            ValueError: If the venue is not supported
        """
        name = name.lower()
        common = {
            "name": name,
            "timeout": self.request_timeout,
            "funding_limit": self.funding_rates_per_exchange,
        }

        if name == "binance":
            return VenueConfig(
                base_url=self.binance_spot_base_url,
                futures_base_url=self.binance_futures_base_url,
                api_key=self.binance_api_key,
                **common
            )
        if name == "okx":
            return VenueConfig(base_url=self.okx_base_url, api_key=self.okx_api_key, **common)
        if name == "bybit":
            return VenueConfig(base_url=self.bybit_base_url, api_key=self.bybit_api_key, **common)

        raise ValueError(
            f"Unsupported exchange: '{name}'. Must be one of: {', '.join(SUPPORTED_EXCHANGES)}"
        )


# ============================================
# Global Settings Instance
# ============================================

settings = Settings()


# ============================================
# Configuration Validation
# ============================================

def validate_configuration() -> None:
    """
    Validate critical configuration settings on application startup.

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    # logging.py imports config.py, so the logger is imported lazily
    from core.logging import logger

    if not settings.exchanges_list:
        raise ValueError("ENABLED_EXCHANGES must contain at least one exchange")

    for name in settings.exchanges_list:
        if name not in SUPPORTED_EXCHANGES:
            raise ValueError(
                f"Invalid exchange: '{name}'. "
                f"Must be one of: {', '.join(SUPPORTED_EXCHANGES)}"
            )

    if len(set(settings.exchanges_list)) != len(settings.exchanges_list):
        raise ValueError("ENABLED_EXCHANGES must not list an exchange twice")

    if settings.request_timeout <= 0:
        raise ValueError(f"Invalid REQUEST_TIMEOUT: {settings.request_timeout}. Must be positive")

    if settings.max_opportunities < 1:
        raise ValueError(f"Invalid MAX_OPPORTUNITIES: {settings.max_opportunities}. Must be >= 1")

    if settings.funding_rates_per_exchange < 1:
        raise ValueError(
            f"Invalid FUNDING_RATES_PER_EXCHANGE: {settings.funding_rates_per_exchange}. Must be >= 1"
        )

    if not (1 <= settings.app_port <= 65535):
        raise ValueError(f"Invalid port number: {settings.app_port}. Must be between 1 and 65535")

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if settings.log_level.upper() not in valid_log_levels:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{settings.log_level}'. "
            f"Must be one of: {', '.join(valid_log_levels)}"
        )

    logger.info("Configuration validated successfully")
    logger.info(f"Exchanges: {', '.join(settings.exchanges_list)}")
    logger.info(f"Request timeout: {settings.request_timeout}s")
    logger.info(f"Server: {settings.app_host}:{settings.app_port}")
    logger.info(f"Log level: {settings.log_level.upper()}")
