"""Per-fixture value analysis."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from edgelab.analysis.edge import confidence_score, evaluate_outcomes
from edgelab.analysis.estimator import (
    ProbabilityEstimate,
    SignalWeights,
    estimate_probabilities,
)
from edgelab.analysis.odds import normalize_odds
from edgelab.analysis.types import (
    RECOMMENDATION_FOR,
    AnalysisResult,
    Fixture,
    OddsSet,
    Outcome,
    OutcomeEvaluation,
    ReasonFactor,
    RecommendedType,
)
from edgelab.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

EFFICIENT_MARKET_REASON = "market is efficiently priced"
NO_MARKETS_REASON = "no valid markets available"
FAILED_REASON = "evaluation failed"


def _skip(
    fixture: Fixture,
    reason: str,
    evaluations: list[OutcomeEvaluation] | None = None,
) -> AnalysisResult:
    best = max(evaluations, key=lambda e: e.value_percentage) if evaluations else None
    return AnalysisResult(
        fixture=fixture,
        recommended_type=RecommendedType.SKIP,
        outcome=None,
        odd=None,
        implied_probability=best.implied_probability if best else 0.0,
        estimated_probability=best.estimated_probability if best else 0.0,
        value_percentage=best.value_percentage if best else 0.0,
        confidence=0,
        is_skip=True,
        skip_reason=reason,
        evaluations=evaluations or [],
    )


def reason_factors(estimate: ProbabilityEstimate, outcome: Outcome) -> list[ReasonFactor]:
    """Signals that moved ``outcome``, strongest first."""

    factors = [
        ReasonFactor(
            name=contribution.name,
            impact=contribution.impact_on(outcome),
            weight=round(abs(contribution.adjustment_for(outcome)), 2),
            description=contribution.description,
        )
        for contribution in estimate.contributions
    ]
    factors.sort(key=lambda factor: factor.weight, reverse=True)
    return factors


def analyze_fixture(
    fixture: Fixture,
    odds_set: OddsSet,
    weights: SignalWeights | None = None,
    min_edge_pct: float | None = None,
    min_probability: float | None = None,
) -> AnalysisResult:
    """Evaluate every available market and recommend the best actionable outcome."""

    market = normalize_odds(odds_set)
    if market.is_empty():
        return _skip(fixture, NO_MARKETS_REASON)

    estimate = estimate_probabilities(fixture, market, weights)
    evaluations = evaluate_outcomes(
        market,
        estimate,
        settings.min_edge_pct if min_edge_pct is None else min_edge_pct,
        settings.min_estimated_probability if min_probability is None else min_probability,
    )
    actionable = [evaluation for evaluation in evaluations if evaluation.actionable]
    if not actionable:
        return _skip(fixture, EFFICIENT_MARKET_REASON, evaluations)

    # max() keeps the first of equal values, i.e. market order.
    best = max(actionable, key=lambda evaluation: evaluation.value_percentage)
    return AnalysisResult(
        fixture=fixture,
        recommended_type=RECOMMENDATION_FOR[best.outcome],
        outcome=best.outcome,
        odd=best.odd,
        implied_probability=best.implied_probability,
        estimated_probability=best.estimated_probability,
        value_percentage=best.value_percentage,
        confidence=confidence_score(best.value_percentage, estimate.contributions, best.outcome),
        reason_factors=reason_factors(estimate, best.outcome),
        evaluations=evaluations,
    )


def _safe_analyze(pair: tuple[Fixture, OddsSet]) -> AnalysisResult:
    fixture, odds_set = pair
    try:
        return analyze_fixture(fixture, odds_set)
    except Exception:  # noqa: BLE001 - degrade to a skip
        logger.exception("Analysis failed for fixture %s", fixture.fixture_id)
        return _skip(fixture, FAILED_REASON)


def analyze_fixtures(
    fixtures: Iterable[tuple[Fixture, OddsSet]],
    max_workers: int | None = None,
) -> list[AnalysisResult]:
    """Analyze a pool of fixtures concurrently, preserving input order."""

    pairs = list(fixtures)
    if not pairs:
        return []
    workers = max_workers or settings.analysis_max_workers
    with ThreadPoolExecutor(max_workers=min(workers, len(pairs))) as pool:
        results = list(pool.map(_safe_analyze, pairs))
    logger.info(
        "Analyzed %d fixtures, %d actionable",
        len(results),
        sum(1 for result in results if not result.is_skip),
    )
    return results


def rank_results(results: Iterable[AnalysisResult]) -> list[AnalysisResult]:
    """Actionable results by value then confidence, followed by skips."""

    return sorted(
        results,
        key=lambda r: (r.is_skip, -r.value_percentage, -r.confidence, r.fixture_id),
    )
