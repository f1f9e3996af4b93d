"""Application configuration from environment variables and .env file."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy connection string; unset keeps accounts in memory only",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Path to server log file")

    # API
    api_title: str = Field(default="ServicePay API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")
    host: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    port: int = Field(default=8000, description="Bind port for uvicorn")

    # Sessions
    session_idle_seconds: int = Field(
        default=3600,
        description="Seconds a session directory may stay unused before it is evicted",
    )

    # Billing
    billing_year: int | None = Field(
        default=None,
        description="Year used for new bill schedules (default: current calendar year)",
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
