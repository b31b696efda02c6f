"""Application configuration using pydantic-settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./portfolio.db"

    # Default datasets seeded into empty collections
    DEFAULT_DATA_DIR: Path = BUNDLED_DATA_DIR

    # Market data
    EXCHANGE_SUFFIX: str = ".AX"
    HISTORY_YEARS: int = 5
    HISTORY_CONCURRENCY: int = 16

    # Frontend origins allowed by CORS
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator("HISTORY_CONCURRENCY")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        """The history refresh pool needs at least one worker."""
        if v < 1:
            raise ValueError(f"HISTORY_CONCURRENCY must be at least 1, got {v}")
        return v

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"


settings = Settings()
