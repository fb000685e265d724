"""Application configuration using Pydantic Settings v2.

Loads configuration from environment variables with .env file support.
All settings are validated at startup and available as typed attributes.
"""

from __future__ import annotations

import functools

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Labor forecast engine settings.

    Configuration is loaded from environment variables.
    A .env file in the project root is also read if present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────
    app_name: str = "LaborForecast"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ── PostgreSQL ───────────────────────────────────────────────
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "labor_forecast"
    postgres_user: str = "labor_forecast"
    postgres_password: str = "labor_forecast_dev_password"
    database_url: str | None = None
    db_pool_size: int = 10
    db_max_overflow: int = 10
    db_pool_recycle_seconds: int = 300

    # ── Forecast defaults ────────────────────────────────────────
    forecast_default_weeks: int = 13  # one quarter
    forecast_min_confidence: float = 60.0
    forecast_include_quoted_projects: bool = True
    forecast_buffer_percentage: float = 10.0
    forecast_cache_hours: int = 24
    forecast_timeout_seconds: float = 60.0
    forecast_max_concurrency: int = 8
    hiring_plan_weeks: int = 12

    # ── Policy knobs ─────────────────────────────────────────────
    foreman_allocation: float = 0.20
    journeyman_allocation: float = 0.50
    apprentice_allocation: float = 0.30
    quoted_probability: float = 0.5
    standard_weekly_hours: float = 40.0
    historical_accuracy_score: float = 75.0

    # Annual fully-loaded cost per head
    foreman_annual_cost: float = 100_000.0
    journeyman_annual_cost: float = 75_000.0
    apprentice_annual_cost: float = 45_000.0
    contractor_annual_cost: float = 120_000.0

    @field_validator(
        "foreman_allocation",
        "journeyman_allocation",
        "apprentice_allocation",
        "quoted_probability",
    )
    @classmethod
    def check_fraction(cls, v: float) -> float:
        """Allocation fractions and probabilities must lie in [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("must be between 0 and 1")
        return v

    @field_validator("standard_weekly_hours")
    @classmethod
    def check_weekly_hours(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("standard_weekly_hours must be > 0")
        return v

    @field_validator("forecast_max_concurrency")
    @classmethod
    def check_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("forecast_max_concurrency must be >= 1")
        return v

    @model_validator(mode="after")
    def build_derived_urls(self) -> Settings:
        """Build database_url from components if not set."""
        if not self.database_url:
            self.database_url = (
                f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        return self


@functools.lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
