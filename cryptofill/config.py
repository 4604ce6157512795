"""
Configuration management using Pydantic

This module provides application-wide configuration using Pydantic BaseSettings
with support for environment variables and type validation.
"""

from decimal import Decimal
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application configuration settings.

    All settings can be overridden using environment variables.
    For example, EXCHANGE_DATA_PATHS will override exchange_data_paths.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_title: str = Field(default="Crypto Order Fulfillment API", description="API title")
    api_version: str = Field(default="1.0.0", description="API version")
    backend_host: str = Field(default="localhost", description="Backend server host")
    backend_port: int = Field(default=8000, description="Backend server port")
    allowed_origins: List[str] = Field(
        default=["*"],
        description="CORS allowed origins"
    )

    # Exchange Data
    exchange_data_paths: str = Field(
        default="exchanges/exchange-01.json,exchanges/exchange-02.json,exchanges/exchange-03.json",
        description="Comma separated exchange snapshot files loaded on startup"
    )

    # Order Limits
    min_order_quantity: Decimal = Field(
        default=Decimal("0.00000001"),
        description="Minimum order quantity"
    )
    max_order_quantity: Decimal = Field(
        default=Decimal("1000000"),
        description="Maximum order quantity"
    )
    min_price: Decimal = Field(
        default=Decimal("0.00000001"),
        description="Minimum acceptable limit price"
    )
    max_price: Decimal = Field(
        default=Decimal("10000000"),
        description="Maximum acceptable limit price"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_dir: str = Field(
        default="",
        description="Directory for log files (empty for console only)"
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def exchange_files(self) -> List[str]:
        """Exchange snapshot paths as a list."""
        return [path.strip() for path in self.exchange_data_paths.split(",") if path.strip()]


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings instance
    """
    return settings
