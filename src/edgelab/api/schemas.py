"""Pydantic schemas for the EdgeLab API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from edgelab.data.schemas import FixtureSchema, LegSchema
from edgelab.parlays.types import RiskLevel


class ReasonFactorOut(BaseModel):
    name: str
    impact: str
    weight: float
    description: str


class AnalysisResponse(BaseModel):
    fixture_id: str
    home_team: str
    away_team: str
    league: str
    kickoff: datetime
    recommended_type: str
    status: str
    odd: float | None
    implied_probability: float
    estimated_probability: float
    value_percentage: float
    confidence: int
    confidence_band: str
    reason_factors: list[ReasonFactorOut] = Field(default_factory=list)
    is_skip: bool
    skip_reason: str = ""


class LegOut(BaseModel):
    fixture_id: str
    match: str
    league: str
    outcome: str
    selection: str
    odd: float
    estimated_probability: float
    implied_probability: float
    value_percentage: float


class AccumulatorResponse(BaseModel):
    name: str
    legs: list[LegOut]
    total_odd: float
    combined_probability: float
    bookmaker_implied_probability: float
    edge: float
    expected_value: float
    suggested_stake: float
    risk_level: str
    quality_score: float


class UnderdogPickOut(BaseModel):
    level: str
    leg: LegOut


class ReportResponse(BaseModel):
    tier: str
    results: list[AnalysisResponse]
    accumulators: list[AccumulatorResponse]
    smart_accumulators: list[AccumulatorResponse]
    underdog_picks: list[UnderdogPickOut]


class AnalyzeRequest(BaseModel):
    fixtures: list[FixtureSchema] = Field(min_length=1)


class ComposeRequest(BaseModel):
    legs: list[LegSchema]
    name: str | None = None
    bankroll: float | None = Field(default=None, ge=0)


class SmartRequest(BaseModel):
    fixtures: list[FixtureSchema] = Field(min_length=1)
    min_legs: int = Field(default=2, ge=2, le=6)
    max_legs: int = Field(default=6, ge=2, le=6)
    target_risk: RiskLevel | None = None
    max_legs_per_league: int = Field(default=2, ge=1)
    min_expected_value: float = 0.0
    top_k: int = Field(default=5, ge=1, le=20)
    bankroll: float | None = Field(default=None, ge=0)


class ReportRequest(BaseModel):
    fixtures: list[FixtureSchema] = Field(min_length=1)
    tier: str = "free"
    bankroll: float | None = Field(default=None, ge=0)
