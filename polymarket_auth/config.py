"""
Configuration management for the Polymarket auth client.

Loads settings from environment variables with validation.
Secrets are SecretStr so they never show up in repr, logs or tracebacks.
"""

from typing import Optional
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import AMOY, ONE_YEAR_SECONDS, POLYGON
from .models import ApiCredentials


class PolymarketSettings(BaseSettings):
    """
    Polymarket client settings.

    Loads from environment variables with POLYMARKET_ prefix.
    """
    model_config = SettingsConfigDict(
        env_prefix="POLYMARKET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API URL
    clob_url: str = Field(
        default="https://clob.polymarket.com",
        description="CLOB API URL"
    )

    # Chain configuration
    chain_id: int = Field(default=POLYGON, description="Polygon chain ID (137 mainnet, 80002 Amoy)")

    # Timeouts
    request_timeout: float = Field(default=30.0, ge=1.0, description="Request timeout (seconds)")
    connect_timeout: float = Field(default=10.0, ge=1.0, description="Connection timeout (seconds)")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_requests: bool = Field(default=False, description="Log all HTTP requests")

    # Metrics
    enable_metrics: bool = Field(default=False, description="Enable Prometheus metrics")
    metrics_port: Optional[int] = Field(default=None, ge=1024, le=65535,
                                        description="Metrics server port (None = no server)")

    # Orders
    order_expiration_seconds: int = Field(default=ONE_YEAR_SECONDS, ge=1,
                                          description="Default order lifetime")

    # Credentials (operator-supplied; never logged)
    private_key: Optional[SecretStr] = Field(None, description="Wallet private key (hex)")
    api_key: Optional[str] = Field(None, description="CLOB API key")
    api_secret: Optional[SecretStr] = Field(None, description="CLOB API secret (url-safe base64)")
    api_passphrase: Optional[SecretStr] = Field(None, description="CLOB API passphrase")

    @field_validator("chain_id")
    @classmethod
    def validate_chain_id(cls, v: int) -> int:
        if v not in (POLYGON, AMOY):
            raise ValueError(f"Unsupported chain_id {v} (expected {POLYGON} or {AMOY})")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    def api_credentials(self) -> Optional[ApiCredentials]:
        """
        Configured API credentials, or None unless all three parts are set.
        """
        if not (self.api_key and self.api_secret and self.api_passphrase):
            return None
        return ApiCredentials(
            api_key=self.api_key,
            secret=self.api_secret.get_secret_value(),
            passphrase=self.api_passphrase.get_secret_value()
        )

    def __repr__(self) -> str:
        """Safe repr without sensitive data."""
        return (
            f"PolymarketSettings("
            f"clob_url={self.clob_url}, "
            f"chain_id={self.chain_id}, "
            f"wallet={'set' if self.private_key else 'unset'}, "
            f"api_key={self.api_key}"
            ")"
        )


def get_settings() -> PolymarketSettings:
    """
    Load settings from the environment.

    Returns:
        Fresh validated settings instance
    """
    return PolymarketSettings()
