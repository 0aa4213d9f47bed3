"""
Application settings.

Values come from environment variables (or a local ``.env`` file) and are
validated by pydantic-settings. Forecast constants live in
:class:`herring_forecast.schemas.ForecastConfig`; ``Settings`` only knows
how to build one.
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from herring_forecast.schemas import ForecastConfig


class Settings(BaseSettings):
    """Runtime settings for the CLI and flows."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "herring-forecast"
    app_env: str = "development"
    debug: bool = False

    source_url: str | None = Field(
        default=None,
        description="URL of the spawn index CSV export",
    )
    api_port: int = Field(default=8000, ge=1, le=65535)

    target_year: int | None = Field(
        default=None,
        description="Forecast year; defaults to the current calendar year",
    )
    window_years: int = Field(default=10, ge=1)

    def resolved_target_year(self) -> int:
        """Return the configured target year, or the current year if unset."""
        return self.target_year if self.target_year is not None else date.today().year

    def forecast_config(self, target_year: int | None = None, **overrides: Any) -> ForecastConfig:
        """Build a ForecastConfig covering the complete years before the target year.

        Args:
            target_year: Forecast year. Falls back to :meth:`resolved_target_year`.
            **overrides: Extra ForecastConfig fields (window bounds, thresholds).
        """
        target = target_year if target_year is not None else self.resolved_target_year()
        return ForecastConfig.for_target_year(target, window_years=self.window_years, **overrides)


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
