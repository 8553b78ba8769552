"""Dataclasses for fixtures, odds and per-fixture analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping


class Outcome(str, Enum):
    HOME = "home"
    DRAW = "draw"
    AWAY = "away"
    OVER = "over"
    UNDER = "under"
    BTTS_YES = "btts_yes"
    BTTS_NO = "btts_no"


# Mutually exclusive outcome groups, in evaluation order.
MARKET_GROUPS: dict[str, tuple[Outcome, ...]] = {
    "match_result": (Outcome.HOME, Outcome.DRAW, Outcome.AWAY),
    "total_goals": (Outcome.OVER, Outcome.UNDER),
    "btts": (Outcome.BTTS_YES, Outcome.BTTS_NO),
}


class RecommendedType(str, Enum):
    HOME_WIN = "HOME_WIN"
    AWAY_WIN = "AWAY_WIN"
    DRAW = "DRAW"
    OVER = "OVER"
    UNDER = "UNDER"
    BTTS = "BTTS"
    BTTS_NO = "BTTS_NO"
    SKIP = "SKIP"


RECOMMENDATION_FOR: dict[Outcome, RecommendedType] = {
    Outcome.HOME: RecommendedType.HOME_WIN,
    Outcome.DRAW: RecommendedType.DRAW,
    Outcome.AWAY: RecommendedType.AWAY_WIN,
    Outcome.OVER: RecommendedType.OVER,
    Outcome.UNDER: RecommendedType.UNDER,
    Outcome.BTTS_YES: RecommendedType.BTTS,
    Outcome.BTTS_NO: RecommendedType.BTTS_NO,
}


class FixtureStatus(str, Enum):
    PENDING_EVALUATION = "PENDING_EVALUATION"
    ACTIONABLE = "ACTIONABLE"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class H2HRecord:
    total_games: int
    home_wins: int
    draws: int
    away_wins: int
    avg_goals: float | None = None


@dataclass(frozen=True)
class TeamStats:
    avg_goals_scored: float
    avg_goals_conceded: float
    btts_percentage: float | None = None
    over25_percentage: float | None = None


@dataclass(frozen=True)
class FixtureFeatures:
    """Optional signal inputs; every field may be missing."""

    home_form: str | None = None
    away_form: str | None = None
    h2h: H2HRecord | None = None
    home_injuries: int | None = None
    away_injuries: int | None = None
    home_position: int | None = None
    away_position: int | None = None
    league_size: int | None = None
    home_stats: TeamStats | None = None
    away_stats: TeamStats | None = None


@dataclass(frozen=True)
class Fixture:
    fixture_id: str
    home_team: str
    away_team: str
    league: str
    kickoff: datetime
    features: FixtureFeatures | None = None


@dataclass(frozen=True)
class OddsSet:
    """Quoted decimal odds for one fixture. ``None`` or ``0`` means unavailable."""

    home: float | None = None
    draw: float | None = None
    away: float | None = None
    over: float | None = None
    under: float | None = None
    btts_yes: float | None = None
    btts_no: float | None = None

    def price(self, outcome: Outcome) -> float | None:
        return getattr(self, outcome.value)

    @classmethod
    def from_mapping(cls, prices: Mapping[str, float | None]) -> "OddsSet":
        known = {outcome.value for outcome in Outcome}
        return cls(**{key: value for key, value in prices.items() if key in known})


@dataclass(frozen=True)
class MarketProbability:
    outcome: Outcome
    group: str
    odd: float
    implied: float
    devigged: float


@dataclass
class MarketProbabilities:
    """Normalised view of an OddsSet; groups that failed land in ``unavailable``."""

    probabilities: dict[Outcome, MarketProbability] = field(default_factory=dict)
    unavailable: dict[str, str] = field(default_factory=dict)

    def __contains__(self, outcome: object) -> bool:
        return outcome in self.probabilities

    def __getitem__(self, outcome: Outcome) -> MarketProbability:
        return self.probabilities[outcome]

    def is_empty(self) -> bool:
        return not self.probabilities

    def devigged(self) -> dict[Outcome, float]:
        return {outcome: prob.devigged for outcome, prob in self.probabilities.items()}

    def group_total(self, group: str) -> float:
        return sum(p.devigged for p in self.probabilities.values() if p.group == group)


@dataclass(frozen=True)
class ReasonFactor:
    name: str
    impact: str  # positive | negative | neutral
    weight: float
    description: str


@dataclass(frozen=True)
class OutcomeEvaluation:
    outcome: Outcome
    odd: float
    implied_probability: float
    estimated_probability: float
    value_percentage: float
    actionable: bool


@dataclass
class AnalysisResult:
    fixture: Fixture
    recommended_type: RecommendedType
    outcome: Outcome | None
    odd: float | None
    implied_probability: float
    estimated_probability: float
    value_percentage: float
    confidence: int
    reason_factors: list[ReasonFactor] = field(default_factory=list)
    is_skip: bool = False
    skip_reason: str = ""
    evaluations: list[OutcomeEvaluation] = field(default_factory=list)

    @property
    def fixture_id(self) -> str:
        return self.fixture.fixture_id

    @property
    def league(self) -> str:
        return self.fixture.league

    @property
    def status(self) -> FixtureStatus:
        return FixtureStatus.SKIPPED if self.is_skip else FixtureStatus.ACTIONABLE

    @property
    def confidence_band(self) -> str:
        if self.confidence >= 80:
            return "high"
        if self.confidence >= 65:
            return "medium"
        return "low"

    def evaluation_for(self, outcome: Outcome) -> OutcomeEvaluation | None:
        for evaluation in self.evaluations:
            if evaluation.outcome == outcome:
                return evaluation
        return None
