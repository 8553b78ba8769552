"""Explainable probability estimates built on top of the de-vigged market.

Each signal reads one slice of ``FixtureFeatures`` and returns bounded
percentage-point adjustments per outcome. With no feature data the estimate
is the market itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from edgelab.analysis.types import Fixture, MarketProbabilities, Outcome
from edgelab.config import Settings, get_settings
from edgelab.errors import DegenerateProbabilityError

logger = logging.getLogger(__name__)

FORM_POINTS = {"W": 3, "D": 1, "L": 0}
FORM_WINDOW = 5
DRAW_BASE_RATE = 0.26
GOALS_LINE = 2.5
AVERAGE_MATCH_GOALS = 2.6
MAX_INJURY_GAP = 5
DEFAULT_LEAGUE_SIZE = 20
NEUTRAL_EPSILON = 0.05


@dataclass(frozen=True)
class SignalWeights:
    max_adjustment_pp: float = 15.0
    form_pp: float = 8.0
    h2h_pp: float = 6.0
    h2h_goals_pp: float = 4.0
    h2h_min_games: int = 3
    injury_pp: float = 1.2
    standings_pp: float = 10.0
    goals_pp: float = 5.0
    stats_blend: float = 0.5
    floor: float = 0.01
    ceiling: float = 0.99

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SignalWeights":
        settings = settings or get_settings()
        return cls(
            max_adjustment_pp=settings.max_signal_adjustment_pp,
            form_pp=settings.form_weight_pp,
            h2h_pp=settings.h2h_weight_pp,
            h2h_goals_pp=settings.h2h_goals_weight_pp,
            h2h_min_games=settings.h2h_min_games,
            injury_pp=settings.injury_weight_pp,
            standings_pp=settings.standings_weight_pp,
            goals_pp=settings.goals_weight_pp,
            stats_blend=settings.stats_blend,
            floor=settings.probability_floor,
            ceiling=settings.probability_ceiling,
        )


@dataclass(frozen=True)
class SignalContribution:
    name: str
    adjustments: dict[Outcome, float]
    description: str

    def adjustment_for(self, outcome: Outcome) -> float:
        return self.adjustments.get(outcome, 0.0)

    def impact_on(self, outcome: Outcome) -> str:
        value = self.adjustment_for(outcome)
        if value > NEUTRAL_EPSILON:
            return "positive"
        if value < -NEUTRAL_EPSILON:
            return "negative"
        return "neutral"


@dataclass
class ProbabilityEstimate:
    probabilities: dict[Outcome, float] = field(default_factory=dict)
    contributions: list[SignalContribution] = field(default_factory=list)


Signal = Callable[[Fixture, dict[Outcome, float], SignalWeights], SignalContribution | None]


def _clip(value: float, bound: float) -> float:
    return max(-bound, min(bound, value))


def _bounded(adjustments: dict[Outcome, float], weights: SignalWeights) -> dict[Outcome, float]:
    return {outcome: _clip(value, weights.max_adjustment_pp) for outcome, value in adjustments.items()}


def form_points_per_game(form: str | None, window: int = FORM_WINDOW) -> float | None:
    """Average league points over the last ``window`` results in a form string."""

    if not form:
        return None
    results = [char for char in form.upper() if char in FORM_POINTS][:window]
    if not results:
        return None
    return sum(FORM_POINTS[char] for char in results) / len(results)


def recent_form(fixture: Fixture, market: dict[Outcome, float], weights: SignalWeights) -> SignalContribution | None:
    features = fixture.features
    home = form_points_per_game(features.home_form)
    away = form_points_per_game(features.away_form)
    if home is None or away is None:
        return None
    diff = (home - away) / 3.0
    shift = diff * weights.form_pp
    return SignalContribution(
        name="recent_form",
        adjustments=_bounded(
            {
                Outcome.HOME: shift,
                Outcome.AWAY: -shift,
                Outcome.DRAW: -abs(diff) * weights.form_pp * 0.25,
            },
            weights,
        ),
        description=(
            f"{fixture.home_team} {home:.2f} pts/game vs "
            f"{fixture.away_team} {away:.2f} pts/game over recent matches"
        ),
    )


def head_to_head(fixture: Fixture, market: dict[Outcome, float], weights: SignalWeights) -> SignalContribution | None:
    h2h = fixture.features.h2h
    if h2h is None or h2h.total_games < weights.h2h_min_games:
        return None
    total = h2h.total_games
    home_share = h2h.home_wins / total
    away_share = h2h.away_wins / total
    draw_share = h2h.draws / total
    shift = (home_share - away_share) * weights.h2h_pp
    adjustments = {
        Outcome.HOME: shift,
        Outcome.AWAY: -shift,
        Outcome.DRAW: (draw_share - DRAW_BASE_RATE) * weights.h2h_pp,
    }
    description = f"{h2h.home_wins}-{h2h.draws}-{h2h.away_wins} in the last {total} meetings"
    if h2h.avg_goals is not None:
        goals_shift = (h2h.avg_goals - GOALS_LINE) * weights.h2h_goals_pp
        adjustments[Outcome.OVER] = goals_shift
        adjustments[Outcome.UNDER] = -goals_shift
        description += f", {h2h.avg_goals:.1f} goals per game"
    return SignalContribution(
        name="head_to_head",
        adjustments=_bounded(adjustments, weights),
        description=description,
    )


def injuries(fixture: Fixture, market: dict[Outcome, float], weights: SignalWeights) -> SignalContribution | None:
    features = fixture.features
    home = features.home_injuries or 0
    away = features.away_injuries or 0
    if home == 0 and away == 0:
        return None
    gap = max(-MAX_INJURY_GAP, min(MAX_INJURY_GAP, away - home))
    shift = gap * weights.injury_pp
    return SignalContribution(
        name="injuries",
        adjustments=_bounded({Outcome.HOME: shift, Outcome.AWAY: -shift}, weights),
        description=f"{home} absentees for {fixture.home_team}, {away} for {fixture.away_team}",
    )


def standings(fixture: Fixture, market: dict[Outcome, float], weights: SignalWeights) -> SignalContribution | None:
    features = fixture.features
    if features.home_position is None or features.away_position is None:
        return None
    size = features.league_size or DEFAULT_LEAGUE_SIZE
    gap = (features.away_position - features.home_position) / size
    shift = gap * weights.standings_pp
    return SignalContribution(
        name="standings",
        adjustments=_bounded({Outcome.HOME: shift, Outcome.AWAY: -shift}, weights),
        description=(
            f"{fixture.home_team} {features.home_position}th vs "
            f"{fixture.away_team} {features.away_position}th of {size}"
        ),
    )


def goal_expectation(fixture: Fixture, market: dict[Outcome, float], weights: SignalWeights) -> SignalContribution | None:
    home, away = fixture.features.home_stats, fixture.features.away_stats
    if home is None or away is None:
        return None
    expected_goals = (home.avg_goals_scored + away.avg_goals_conceded) / 2 + (
        away.avg_goals_scored + home.avg_goals_conceded
    ) / 2
    shift = (expected_goals - AVERAGE_MATCH_GOALS) * weights.goals_pp
    if (
        home.over25_percentage is not None
        and away.over25_percentage is not None
        and Outcome.OVER in market
    ):
        stats_rate = (home.over25_percentage + away.over25_percentage) / 200.0
        shift += (stats_rate - market[Outcome.OVER]) * weights.stats_blend * 100
    return SignalContribution(
        name="goal_expectation",
        adjustments=_bounded({Outcome.OVER: shift, Outcome.UNDER: -shift}, weights),
        description=f"Expected goals {expected_goals:.2f} from scoring and conceding averages",
    )


def btts_trend(fixture: Fixture, market: dict[Outcome, float], weights: SignalWeights) -> SignalContribution | None:
    home, away = fixture.features.home_stats, fixture.features.away_stats
    if home is None or away is None or Outcome.BTTS_YES not in market:
        return None
    if home.btts_percentage is None or away.btts_percentage is None:
        return None
    stats_rate = (home.btts_percentage + away.btts_percentage) / 200.0
    shift = (stats_rate - market[Outcome.BTTS_YES]) * weights.stats_blend * 100
    return SignalContribution(
        name="btts_trend",
        adjustments=_bounded({Outcome.BTTS_YES: shift, Outcome.BTTS_NO: -shift}, weights),
        description=f"Both teams scored in {stats_rate:.0%} of recent matches",
    )


SIGNALS: tuple[Signal, ...] = (
    recent_form,
    head_to_head,
    injuries,
    standings,
    goal_expectation,
    btts_trend,
)


def _check_probability(value: float, outcome: Outcome) -> float:
    if not 0.0 < value < 1.0:
        raise DegenerateProbabilityError(value, outcome.value)
    return value


def _clamp(value: float, outcome: Outcome, fixture_id: str, weights: SignalWeights) -> float:
    try:
        _check_probability(value, outcome)
    except DegenerateProbabilityError as exc:
        logger.warning("Clamping estimate for fixture %s: %s", fixture_id, exc)
    return min(max(value, weights.floor), weights.ceiling)


def estimate_probabilities(
    fixture: Fixture,
    market: MarketProbabilities,
    weights: SignalWeights | None = None,
) -> ProbabilityEstimate:
    """Estimate a true probability per available outcome."""

    weights = weights or SignalWeights.from_settings()
    baseline = market.devigged()
    contributions: list[SignalContribution] = []
    if fixture.features is not None:
        for signal in SIGNALS:
            contribution = signal(fixture, baseline, weights)
            if contribution is not None:
                contributions.append(contribution)

    estimate = ProbabilityEstimate(contributions=contributions)
    for outcome, base in baseline.items():
        total_pp = sum(c.adjustment_for(outcome) for c in contributions)
        estimate.probabilities[outcome] = _clamp(
            base + total_pp / 100.0, outcome, fixture.fixture_id, weights
        )
    return estimate
