"""Smart accumulator search tests."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone

import pytest

from edgelab.analysis.types import (
    AnalysisResult,
    Fixture,
    Outcome,
    OutcomeEvaluation,
    RecommendedType,
)
from edgelab.parlays.optimizer import build_smart_accumulators, candidate_legs, rank_accumulators
from edgelab.parlays.types import Accumulator, Leg, OptimizerConstraints, RiskLevel


def _result(
    fixture_id: str,
    league: str,
    odd: float,
    estimated: float,
    confidence: int = 60,
    skip: bool = False,
) -> AnalysisResult:
    implied = 1 / odd
    value = round((estimated - implied) * 100, 1)
    evaluation = OutcomeEvaluation(
        outcome=Outcome.HOME,
        odd=odd,
        implied_probability=implied,
        estimated_probability=estimated,
        value_percentage=value,
        actionable=not skip,
    )
    return AnalysisResult(
        fixture=Fixture(
            fixture_id=fixture_id,
            home_team=f"Home {fixture_id}",
            away_team=f"Away {fixture_id}",
            league=league,
            kickoff=datetime(2026, 10, 25, 14, 0, tzinfo=timezone.utc),
        ),
        recommended_type=RecommendedType.SKIP if skip else RecommendedType.HOME_WIN,
        outcome=None if skip else Outcome.HOME,
        odd=None if skip else odd,
        implied_probability=implied,
        estimated_probability=estimated,
        value_percentage=value,
        confidence=0 if skip else confidence,
        is_skip=skip,
        evaluations=[evaluation],
    )


def _pool() -> list[AnalysisResult]:
    return [
        _result("a", "Premier League", 1.80, 0.62),
        _result("b", "La Liga", 2.10, 0.53),
        _result("c", "Serie A", 1.55, 0.70),
        _result("d", "Bundesliga", 2.40, 0.46),
        _result("e", "Ligue 1", 1.70, 0.64),
        _result("skipped", "Eredivisie", 1.40, 0.90, skip=True),
    ]


def test_skipped_fixtures_never_enter_the_search() -> None:
    accumulators = build_smart_accumulators(_pool(), OptimizerConstraints(top_k=10))
    assert accumulators
    for acc in accumulators:
        assert "skipped" not in acc.fixture_ids


def test_results_respect_size_and_distinctness() -> None:
    constraints = OptimizerConstraints(min_legs=2, max_legs=4, top_k=5)
    accumulators = build_smart_accumulators(_pool(), constraints)

    assert 0 < len(accumulators) <= 5
    assert len({acc.fixture_ids for acc in accumulators}) == len(accumulators)
    for acc in accumulators:
        assert 2 <= acc.leg_count <= 4
        assert len(acc.fixture_ids) == acc.leg_count
        assert acc.expected_value >= 0.0
    scores = [acc.quality_score for acc in accumulators]
    assert scores == sorted(scores, reverse=True)


def test_league_cap_is_enforced() -> None:
    pool = [_result(f"f{i}", "Premier League", 1.60 + i * 0.1, 0.70 - i * 0.02) for i in range(5)]
    pool.append(_result("x", "La Liga", 1.90, 0.60))
    constraints = OptimizerConstraints(max_legs=4, max_legs_per_league=2, top_k=10)
    accumulators = build_smart_accumulators(pool, constraints)
    assert accumulators
    for acc in accumulators:
        assert max(Counter(leg.league for leg in acc.legs).values()) <= 2


def test_target_risk_limits_total_odds() -> None:
    constraints = OptimizerConstraints(target_risk=RiskLevel.LOW, top_k=10)
    accumulators = build_smart_accumulators(_pool(), constraints)
    assert accumulators
    for acc in accumulators:
        assert acc.risk_level == RiskLevel.LOW
        assert acc.total_odd < 3.0


def test_not_enough_candidates_returns_nothing() -> None:
    pool = [_result("a", "Premier League", 1.80, 0.62), _result("s", "La Liga", 2.0, 0.6, skip=True)]
    assert build_smart_accumulators(pool) == []


def test_candidate_legs_rank_by_value() -> None:
    legs = candidate_legs(_pool(), limit=3)
    assert [leg.fixture_id for leg in legs] == ["a", "c", "b"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_legs": 1},
        {"max_legs": 7},
        {"min_legs": 4, "max_legs": 3},
        {"top_k": 0},
        {"max_legs_per_league": 0},
    ],
)
def test_invalid_constraints_raise(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        OptimizerConstraints(**kwargs)


def _scored(name: str, fixture_ids: list[str], quality: float) -> Accumulator:
    legs = [
        Leg(
            fixture_id=fid,
            home_team="H",
            away_team="A",
            league=f"League {fid}",
            outcome=Outcome.HOME,
            odd=1.8,
            estimated_probability=0.6,
            implied_probability=0.55,
        )
        for fid in fixture_ids
    ]
    return Accumulator(
        name=name,
        legs=legs,
        total_odd=1.8 ** len(legs),
        combined_probability=0.6 ** len(legs),
        bookmaker_implied_probability=0.55 ** len(legs),
        edge=0.0,
        expected_value=0.1,
        suggested_stake=10.0,
        risk_level=RiskLevel.MEDIUM,
        quality_score=quality,
    )


def test_equal_quality_prefers_fewer_legs() -> None:
    longer = _scored("three", ["a", "b", "c"], 7.5)
    shorter = _scored("two", ["d", "e"], 7.5)
    best = _scored("best", ["f", "g", "h"], 9.0)
    ranked = rank_accumulators([longer, best, shorter])
    assert [acc.name for acc in ranked] == ["best", "two", "three"]
