"""Library configuration management using Pydantic Settings.

This module loads and validates environment variables using Pydantic Settings.
All configuration is loaded from environment variables or a .env file.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Attributes:
        environment: Runtime environment (development, staging, production)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        questionnaires_dir: Path to directory containing questionnaire files
        strict_extraction: Abort a whole enableWhen block on its first bad entry
            (False keeps the valid entries and logs the bad ones)
    """

    environment: str = Field(
        default="development",
        description="Runtime environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    questionnaires_dir: str = Field(
        default="./questionnaires",
        description="Path to questionnaires directory"
    )
    strict_extraction: bool = Field(
        default=True,
        description="Fail fast on the first malformed enableWhen entry of an item"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Settings singleton

    Note:
        Uses lru_cache so settings are only loaded once. Call
        get_settings.cache_clear() after changing the environment.
    """
    return Settings()
