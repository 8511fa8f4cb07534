"""Runtime settings: store connection, logging and the society catalogues."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIME_SLOTS = [
    "06:00 AM - 08:00 AM",
    "08:00 AM - 10:00 AM",
    "04:00 PM - 06:00 PM",
    "06:00 PM - 08:00 PM",
]


class Settings(BaseSettings):
    """Values read from the environment or a .env file; unknown keys are ignored."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./society.db",
        description="SQLAlchemy connection string for the ledger store",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")
    store_timeout_seconds: float = Field(
        default=5.0, description="Seconds to wait for the store before failing a command"
    )
    store_max_retries: int = Field(
        default=3, description="Retries of a command after a transient store conflict"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file")

    # Society layout and catalogues
    towers: list[str] = Field(default_factory=lambda: ["A", "B", "C", "D"])
    amenities: list[str] = Field(default_factory=lambda: ["Clubhouse", "Gym", "Swimming Pool"])
    time_slots: list[str] = Field(default_factory=lambda: list(DEFAULT_TIME_SLOTS))
    complaint_categories: list[str] = Field(
        default_factory=lambda: ["Water", "Electricity", "Lift", "Cleaning", "Other"]
    )

    # API
    api_title: str = Field(default="Society Operations API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


# Global settings instance; read by the migration environment
settings = get_settings()

__all__ = ["Settings", "get_settings", "settings", "DEFAULT_TIME_SLOTS"]
