"""Environment-driven configuration helpers for EdgeLab."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    log_level: str = Field(default="INFO")

    # Edge policy
    min_edge_pct: float = Field(default=3.0, ge=0.0, le=100.0)
    min_estimated_probability: float = Field(default=0.05, ge=0.0, le=1.0)
    probability_floor: float = Field(default=0.01, gt=0.0, lt=0.5)
    probability_ceiling: float = Field(default=0.99, gt=0.5, lt=1.0)

    # Estimator weights, in percentage points
    max_signal_adjustment_pp: float = Field(default=15.0, ge=0.0, le=50.0)
    form_weight_pp: float = Field(default=8.0, ge=0.0)
    h2h_weight_pp: float = Field(default=6.0, ge=0.0)
    h2h_goals_weight_pp: float = Field(default=4.0, ge=0.0)
    h2h_min_games: int = Field(default=3, ge=1)
    injury_weight_pp: float = Field(default=1.2, ge=0.0)
    standings_weight_pp: float = Field(default=10.0, ge=0.0)
    goals_weight_pp: float = Field(default=5.0, ge=0.0)
    stats_blend: float = Field(default=0.5, ge=0.0, le=1.0)

    # Accumulators
    accumulator_min_legs: int = Field(default=2, ge=2)
    accumulator_max_legs: int = Field(default=6, ge=2, le=6)
    risk_low_max_odd: float = Field(default=3.0, gt=1.0)
    risk_medium_max_odd: float = Field(default=8.0, gt=1.0)
    default_bankroll: float = Field(default=1000.0, ge=0.0)
    kelly_fraction: float = Field(default=0.25, ge=0.0, le=1.0)
    stake_cap_low: float = Field(default=0.05, ge=0.0, le=1.0)
    stake_cap_medium: float = Field(default=0.03, ge=0.0, le=1.0)
    stake_cap_high: float = Field(default=0.01, ge=0.0, le=1.0)

    # Smart accumulator search
    optimizer_top_k: int = Field(default=5, ge=1, le=20)
    optimizer_beam_width: int = Field(default=8, ge=1, le=64)
    optimizer_pool_size: int = Field(default=24, ge=2, le=200)
    max_legs_per_league: int = Field(default=2, ge=1)

    analysis_max_workers: int = Field(default=4, ge=1, le=64)

    edgelab_api_key: str = Field(default="", validation_alias="EDGELAB_API_KEY")

    @model_validator(mode="after")
    def _check_bands(self) -> "Settings":
        if self.risk_low_max_odd >= self.risk_medium_max_odd:
            raise ValueError("risk_low_max_odd must be below risk_medium_max_odd")
        if self.accumulator_min_legs > self.accumulator_max_legs:
            raise ValueError("accumulator_min_legs cannot exceed accumulator_max_legs")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]


def get_api_access_key() -> str:
    key = os.getenv("EDGELAB_API_KEY") or get_settings().edgelab_api_key
    if not key:
        raise RuntimeError(
            "EDGELAB_API_KEY is not configured. Set it in your environment or .env file."
        )
    return key
