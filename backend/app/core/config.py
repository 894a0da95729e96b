"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "FlowScan Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Series provider
    data_source: str = "yahoo"  # Options: yahoo, mock
    enable_mock_fallback: bool = False
    history_lookback: int = 90  # Daily bars requested per instrument

    # Screening
    max_concurrent_fetches: int = 4
    default_min_score: int = 60
    default_limit: int = 15

    # Engine
    fibonacci_lookback: int = 20
    scoring_tables_path: Optional[str] = None  # JSON file with extra weight tables


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
