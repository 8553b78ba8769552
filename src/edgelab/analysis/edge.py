"""Value edge and confidence scoring."""

from __future__ import annotations

from collections.abc import Iterable

from edgelab.analysis.estimator import ProbabilityEstimate, SignalContribution
from edgelab.analysis.types import MarketProbabilities, Outcome, OutcomeEvaluation
from edgelab.config import get_settings

settings = get_settings()

BASE_CONFIDENCE = 40.0
EDGE_POINTS_PER_PP = 2.0
EDGE_POINTS_CAP = 30.0
SUPPORT_POINTS = 4.0
SUPPORT_CAP = 5
STRENGTH_POINTS_PER_PP = 0.5
STRENGTH_CAP = 10.0
CONFLICT_PENALTY = 35.0
MIN_SIGNAL_PP = 0.5


def value_percentage(estimated: float, implied: float) -> float:
    """Percentage-point gap between estimate and de-vigged implied probability."""

    return round((estimated - implied) * 100, 1)


def is_actionable(
    value_pct: float,
    estimated: float,
    min_edge_pct: float = settings.min_edge_pct,
    min_probability: float = settings.min_estimated_probability,
) -> bool:
    return value_pct > min_edge_pct and estimated > min_probability


def evaluate_outcomes(
    market: MarketProbabilities,
    estimate: ProbabilityEstimate,
    min_edge_pct: float = settings.min_edge_pct,
    min_probability: float = settings.min_estimated_probability,
) -> list[OutcomeEvaluation]:
    evaluations: list[OutcomeEvaluation] = []
    for outcome, prob in market.probabilities.items():
        estimated = estimate.probabilities[outcome]
        value = value_percentage(estimated, prob.devigged)
        evaluations.append(
            OutcomeEvaluation(
                outcome=outcome,
                odd=prob.odd,
                implied_probability=prob.devigged,
                estimated_probability=estimated,
                value_percentage=value,
                actionable=is_actionable(value, estimated, min_edge_pct, min_probability),
            )
        )
    return evaluations


def confidence_score(
    value_pct: float,
    contributions: Iterable[SignalContribution],
    outcome: Outcome,
) -> int:
    """Score 0-100 that rewards edge and supporting signals and punishes disagreement.

    The conflict penalty scales with the ratio of the weaker side to the
    stronger side, so two strong opposing signals cost the most.
    """

    supporting = 0.0
    opposing = 0.0
    support_count = 0
    for contribution in contributions:
        adjustment = contribution.adjustment_for(outcome)
        if abs(adjustment) < MIN_SIGNAL_PP:
            continue
        if adjustment > 0:
            supporting += adjustment
            support_count += 1
        else:
            opposing += -adjustment

    score = BASE_CONFIDENCE
    score += min(max(value_pct, 0.0) * EDGE_POINTS_PER_PP, EDGE_POINTS_CAP)
    score += min(support_count, SUPPORT_CAP) * SUPPORT_POINTS
    score += min(supporting * STRENGTH_POINTS_PER_PP, STRENGTH_CAP)
    if supporting > 0 and opposing > 0:
        conflict = min(supporting, opposing) / max(supporting, opposing)
        score -= conflict * CONFLICT_PENALTY
    elif opposing > 0:
        score -= CONFLICT_PENALTY / 2
    return int(round(max(0.0, min(100.0, score))))
