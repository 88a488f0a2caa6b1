"""
Application Configuration

Settings are read from environment variables (and an optional .env file)
using pydantic-settings. Components receive a Settings instance explicitly;
get_settings() only provides the process default.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the intake pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="INTAKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    python_env: str = "development"
    log_level: str = "INFO"

    # Key/value store. Without a redis_url the in-memory store is used.
    redis_url: str | None = None
    store_namespace: str = "intake"

    # Sleep for the simulated I/O delay of each pipeline step
    simulate_latency: bool = True

    school_name: str = "Bright Future Academy"
    admissions_email: str = "admissions@brightfutureacademy.edu"

    @property
    def is_development(self) -> bool:
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        return self.python_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get the cached process-wide settings."""
    return Settings()
