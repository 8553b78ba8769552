"""Pydantic schemas for caller-supplied fixtures, odds and legs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from edgelab.analysis.types import (
    Fixture,
    FixtureFeatures,
    H2HRecord,
    OddsSet,
    Outcome,
    TeamStats,
)
from edgelab.parlays.types import Leg


class H2HSchema(BaseModel):
    total_games: int = Field(ge=0)
    home_wins: int = Field(ge=0)
    draws: int = Field(ge=0)
    away_wins: int = Field(ge=0)
    avg_goals: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class TeamStatsSchema(BaseModel):
    avg_goals_scored: float = Field(ge=0)
    avg_goals_conceded: float = Field(ge=0)
    btts_percentage: float | None = Field(default=None, ge=0, le=100)
    over25_percentage: float | None = Field(default=None, ge=0, le=100)


class FixtureFeaturesSchema(BaseModel):
    home_form: str | None = Field(default=None, description="e.g. WWDLW")
    away_form: str | None = None
    h2h: H2HSchema | None = None
    home_injuries: int | None = Field(default=None, ge=0)
    away_injuries: int | None = Field(default=None, ge=0)
    home_position: int | None = Field(default=None, ge=1)
    away_position: int | None = Field(default=None, ge=1)
    league_size: int | None = Field(default=None, ge=2)
    home_stats: TeamStatsSchema | None = None
    away_stats: TeamStatsSchema | None = None

    def to_domain(self) -> FixtureFeatures:
        return FixtureFeatures(
            home_form=self.home_form,
            away_form=self.away_form,
            h2h=H2HRecord(**self.h2h.model_dump()) if self.h2h else None,
            home_injuries=self.home_injuries,
            away_injuries=self.away_injuries,
            home_position=self.home_position,
            away_position=self.away_position,
            league_size=self.league_size,
            home_stats=TeamStats(**self.home_stats.model_dump()) if self.home_stats else None,
            away_stats=TeamStats(**self.away_stats.model_dump()) if self.away_stats else None,
        )


class OddsSetSchema(BaseModel):
    """Decimal odds; missing or zero means the market is not offered."""

    home: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    draw: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    away: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    over: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    under: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    btts_yes: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    btts_no: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    def to_domain(self) -> OddsSet:
        return OddsSet(**self.model_dump())


class FixtureSchema(BaseModel):
    fixture_id: str
    home_team: str
    away_team: str
    league: str
    kickoff: datetime
    odds: OddsSetSchema
    features: FixtureFeaturesSchema | None = None

    def to_domain(self) -> tuple[Fixture, OddsSet]:
        fixture = Fixture(
            fixture_id=self.fixture_id,
            home_team=self.home_team,
            away_team=self.away_team,
            league=self.league,
            kickoff=self.kickoff,
            features=self.features.to_domain() if self.features else None,
        )
        return fixture, self.odds.to_domain()


class LegSchema(BaseModel):
    fixture_id: str
    home_team: str
    away_team: str
    league: str
    outcome: Outcome
    odd: float = Field(allow_inf_nan=False)
    estimated_probability: float = Field(allow_inf_nan=False)
    implied_probability: float = Field(allow_inf_nan=False)
    value_percentage: float = 0.0
    confidence: int = Field(default=0, ge=0, le=100)

    def to_domain(self) -> Leg:
        return Leg(**self.model_dump())
