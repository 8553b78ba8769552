"""Dataclasses for legs, accumulators and search constraints."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from edgelab.analysis.types import Outcome
from edgelab.config import Settings, get_settings

SELECTION_LABELS: dict[Outcome, str] = {
    Outcome.HOME: "{home} to win",
    Outcome.DRAW: "Draw",
    Outcome.AWAY: "{away} to win",
    Outcome.OVER: "Over 2.5 goals",
    Outcome.UNDER: "Under 2.5 goals",
    Outcome.BTTS_YES: "Both teams to score",
    Outcome.BTTS_NO: "Not both teams to score",
}


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Leg:
    fixture_id: str
    home_team: str
    away_team: str
    league: str
    outcome: Outcome
    odd: float
    estimated_probability: float
    implied_probability: float
    value_percentage: float = 0.0
    confidence: int = 0

    @property
    def selection(self) -> str:
        return SELECTION_LABELS[self.outcome].format(home=self.home_team, away=self.away_team)

    @property
    def match(self) -> str:
        return f"{self.home_team} x {self.away_team}"


@dataclass
class Accumulator:
    """Multi-leg bet; probabilities assume the legs are independent."""

    name: str
    legs: List[Leg]
    total_odd: float
    combined_probability: float
    bookmaker_implied_probability: float
    edge: float
    expected_value: float
    suggested_stake: float
    risk_level: RiskLevel
    quality_score: float
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def leg_count(self) -> int:
        return len(self.legs)

    @property
    def fixture_ids(self) -> frozenset[str]:
        return frozenset(leg.fixture_id for leg in self.legs)

    @property
    def leagues(self) -> set[str]:
        return {leg.league for leg in self.legs}

    def potential_return(self, stake: float | None = None) -> float:
        stake = self.suggested_stake if stake is None else stake
        return stake * self.total_odd


@dataclass(frozen=True)
class OptimizerConstraints:
    min_legs: int = 2
    max_legs: int = 6
    target_risk: RiskLevel | None = None
    max_legs_per_league: int = 2
    min_expected_value: float = 0.0
    top_k: int = 5
    beam_width: int = 8
    candidate_pool_size: int = 24

    def __post_init__(self) -> None:
        if self.min_legs < 2:
            raise ValueError("min_legs must be at least 2")
        if self.max_legs > 6:
            raise ValueError("max_legs must be at most 6")
        if self.min_legs > self.max_legs:
            raise ValueError("min_legs cannot exceed max_legs")
        if self.top_k < 1 or self.beam_width < 1 or self.candidate_pool_size < 2:
            raise ValueError("top_k, beam_width and candidate_pool_size must be positive")
        if self.max_legs_per_league < 1:
            raise ValueError("max_legs_per_league must be at least 1")

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides) -> "OptimizerConstraints":
        settings = settings or get_settings()
        values = {
            "min_legs": settings.accumulator_min_legs,
            "max_legs": settings.accumulator_max_legs,
            "max_legs_per_league": settings.max_legs_per_league,
            "top_k": settings.optimizer_top_k,
            "beam_width": settings.optimizer_beam_width,
            "candidate_pool_size": settings.optimizer_pool_size,
        }
        values.update(overrides)
        return cls(**values)
