"""
Configuration Management Module

This module handles loading, validating, and providing access to application configuration
from environment variables (.env file).

Uses Pydantic Settings for automatic validation and type conversion.

Key Features:
- Loads configuration from .env file
- Validates all required settings
- Provides type-safe access to configuration values
- Keeps LATOKEN credentials optional (public endpoints need none)

Usage:
    from core.config import settings

    # Access configuration values
    print(settings.latoken_base_url)
    print(settings.has_credentials)
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application Settings

    This class defines all configuration parameters for the application.
    Values are automatically loaded from environment variables or .env file.

    Attributes:
        latoken_base_url: Base URL for the LATOKEN REST API
        latoken_api_version: Versioned path prefix ("v2" -> "/v2/...")
        latoken_api_key: API key (optional, only needed for private endpoints)
        latoken_secret_key: Secret used for HMAC request signing
        request_timeout: Timeout for HTTP requests in seconds
        max_retries: Transport attempts per request
        retry_backoff: Linear backoff step between attempts (seconds)
        orderbook_default_depth: Depth used when fetch_order_book gets no limit
        trades_default_limit: Limit used when fetch_trades gets no limit
        app_host: Host address for FastAPI server
        app_port: Port number for FastAPI server
        environment: Current environment (development, production)
        debug: Enable debug mode with verbose logging
        log_level: Logging level
        cors_origins: Comma-separated list of allowed CORS origins
    """

    # ============================================
    # LATOKEN API Configuration
    # ============================================

    latoken_base_url: str = Field(
        default="https://api.latoken.com",
        description="LATOKEN REST API base URL"
    )

    latoken_api_version: str = Field(
        default="v2",
        description="LATOKEN API version used as path prefix"
    )

    latoken_api_key: str = Field(
        default="",
        description="LATOKEN API key (optional for public endpoints)"
    )

    latoken_secret_key: str = Field(
        default="",
        description="LATOKEN API secret (optional for public endpoints)"
    )

    # ============================================
    # Transport Configuration
    # ============================================

    request_timeout: int = Field(
        default=10,
        description="HTTP request timeout in seconds"
    )

    max_retries: int = Field(
        default=3,
        description="Maximum transport attempts for timeouts and 5xx/429 responses"
    )

    retry_backoff: float = Field(
        default=1.5,
        description="Retry delay step in seconds (delay = step * attempt)"
    )

    # ============================================
    # Market Data Defaults
    # ============================================

    orderbook_default_depth: int = Field(
        default=10,
        description="Default order book depth (exchange max is 500)"
    )

    trades_default_limit: int = Field(
        default=50,
        description="Default trade history limit (exchange max is 100)"
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

    # ============================================
    # Pydantic Settings Configuration
    # ============================================

    model_config = SettingsConfigDict(
        # Look for .env file in the project root
        env_file=".env",
        # Ignore extra fields in .env that aren't defined here
        extra="ignore",
        # Case-insensitive environment variable matching
        case_sensitive=False
    )

    # ============================================
    # Custom Properties
    # ============================================

    @property
    def api_prefix(self) -> str:
        """
        Versioned path prefix that every request path is appended to.

        Example:
            >>> settings.api_prefix
            '/v2/'
        """
        return f"/{self.latoken_api_version.strip('/')}/"

    @property
    def has_credentials(self) -> bool:
        """
        Check whether private endpoints can be signed.

        Returns:
            True if both API key and secret are configured
        """
        return bool(self.latoken_api_key and self.latoken_secret_key)

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Convert comma-separated CORS origins string to a list.

        Example:
            >>> settings.cors_origins_list
            ['http://localhost:3000', 'http://localhost:5173']
        """
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# ============================================
# Global Settings Instance
# ============================================

# Create a single instance of settings to be imported throughout the application
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
    # Import logger here to avoid circular import
    # (logging.py imports config.py, so we can't import at module level)
    from core.logging import logger

    if not settings.latoken_base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid LATOKEN_BASE_URL: '{settings.latoken_base_url}'. "
            f"Must start with http:// or https://"
        )

    # Exactly one of key/secret set means private calls would fail at signing time
    if bool(settings.latoken_api_key) != bool(settings.latoken_secret_key):
        raise ValueError("LATOKEN_API_KEY and LATOKEN_SECRET_KEY must be set together")

    if settings.max_retries < 1:
        raise ValueError(f"Invalid MAX_RETRIES: {settings.max_retries}. Must be at least 1")

    if not (1 <= settings.orderbook_default_depth <= 500):
        raise ValueError(
            f"Invalid ORDERBOOK_DEFAULT_DEPTH: {settings.orderbook_default_depth}. "
            f"Must be between 1 and 500"
        )

    if not (1 <= settings.trades_default_limit <= 100):
        raise ValueError(
            f"Invalid TRADES_DEFAULT_LIMIT: {settings.trades_default_limit}. "
            f"Must be between 1 and 100"
        )

    # Validate port number
    if not (1 <= settings.app_port <= 65535):
        raise ValueError(f"Invalid port number: {settings.app_port}. Must be between 1 and 65535")

    # Validate log level
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if settings.log_level.upper() not in valid_log_levels:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{settings.log_level}'. "
            f"Must be one of: {', '.join(valid_log_levels)}"
        )

    # Log successful validation
    logger.info("Configuration validated successfully")
    logger.info(f"LATOKEN API: {settings.latoken_base_url}{settings.api_prefix}")
    logger.info(f"Private endpoints: {'enabled' if settings.has_credentials else 'disabled (no credentials)'}")
    logger.info(f"Server: {settings.app_host}:{settings.app_port}")
    logger.info(f"Log level: {settings.log_level.upper()}")
