"""
Configuration module for the Rental Returns service.
Loads settings from environment variables and an optional .env file.
"""

from pydantic_settings import BaseSettings
from pydantic import Field

from use_cases.rentals.domain.policies import DEFAULT_IDENTIFIER_PATTERN


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_host: str = Field(
        default="0.0.0.0",
        alias="APP_HOST",
        description="Host to bind the application"
    )
    app_port: int = Field(
        default=8000,
        alias="APP_PORT",
        description="Port to bind the application"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    # Data Store Configuration
    store_backend: str = Field(
        default="cosmos",
        alias="STORE_BACKEND",
        description="Where rentals and stock live: 'cosmos' or 'memory'"
    )
    seed_sample_data: bool = Field(
        default=True,
        alias="SEED_SAMPLE_DATA",
        description="Load the sample movies, customers, rentals and users into the memory backend"
    )

    # Authentication
    session_ttl_hours: int = Field(
        default=24,
        alias="SESSION_TTL_HOURS",
        description="Lifetime of a login session token"
    )

    # Validation
    identifier_pattern: str = Field(
        default=DEFAULT_IDENTIFIER_PATTERN,
        alias="IDENTIFIER_PATTERN",
        description="Regular expression a customerId or movieId must match"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
