"""Themed accumulator and underdog tests."""

from __future__ import annotations

from datetime import datetime, timezone

from edgelab.analysis.types import (
    RECOMMENDATION_FOR,
    AnalysisResult,
    Fixture,
    Outcome,
    OutcomeEvaluation,
)
from edgelab.parlays import themes


def _result(fixture_id: str, prices: dict[Outcome, tuple[float, float]], confidence: int = 60) -> AnalysisResult:
    """``prices`` maps outcome to (odd, estimated probability); the first entry is recommended."""

    evaluations = []
    for outcome, (odd, estimated) in prices.items():
        implied = 1 / odd
        evaluations.append(
            OutcomeEvaluation(
                outcome=outcome,
                odd=odd,
                implied_probability=implied,
                estimated_probability=estimated,
                value_percentage=round((estimated - implied) * 100, 1),
                actionable=True,
            )
        )
    best = evaluations[0]
    return AnalysisResult(
        fixture=Fixture(
            fixture_id=fixture_id,
            home_team=f"Home {fixture_id}",
            away_team=f"Away {fixture_id}",
            league="Premier League",
            kickoff=datetime(2026, 10, 26, 16, 30, tzinfo=timezone.utc),
        ),
        recommended_type=RECOMMENDATION_FOR[best.outcome],
        outcome=best.outcome,
        odd=best.odd,
        implied_probability=best.implied_probability,
        estimated_probability=best.estimated_probability,
        value_percentage=best.value_percentage,
        confidence=confidence,
        evaluations=evaluations,
    )


def test_favorites_double_picks_two_most_confident_in_range() -> None:
    results = [
        _result("a", {Outcome.HOME: (1.70, 0.64)}, confidence=70),
        _result("b", {Outcome.HOME: (2.00, 0.55)}, confidence=60),
        _result("c", {Outcome.HOME: (2.50, 0.45)}, confidence=90),
        _result("d", {Outcome.HOME: (1.90, 0.56)}, confidence=50),
    ]
    acc = themes.favorites_double(results, bankroll=500)
    assert acc is not None
    assert acc.name == "Favorites Double"
    assert [leg.fixture_id for leg in acc.legs] == ["a", "b"]
    assert all(leg.outcome == Outcome.HOME for leg in acc.legs)


def test_favorites_double_needs_two_candidates() -> None:
    results = [_result("a", {Outcome.HOME: (1.70, 0.64)})]
    assert themes.favorites_double(results) is None


def test_goals_accumulator_uses_over_market() -> None:
    results = [
        _result("a", {Outcome.HOME: (1.70, 0.64), Outcome.OVER: (1.80, 0.61)}),
        _result("b", {Outcome.OVER: (1.75, 0.66)}),
        _result("c", {Outcome.OVER: (2.10, 0.45)}),
        _result("d", {Outcome.OVER: (1.65, 0.58)}),
        _result("e", {Outcome.HOME: (1.50, 0.70)}),
    ]
    acc = themes.goals_accumulator(results)
    assert acc is not None
    assert acc.name == "Over 2.5 Goals x3"
    assert [leg.fixture_id for leg in acc.legs] == ["b", "a", "d"]
    assert all(leg.outcome == Outcome.OVER for leg in acc.legs)


def test_underdog_picks_one_per_band() -> None:
    results = [
        _result("a", {Outcome.HOME: (1.50, 0.68), Outcome.AWAY: (3.00, 0.36)}),
        _result("b", {Outcome.HOME: (1.45, 0.70), Outcome.AWAY: (3.20, 0.33)}),
        _result("c", {Outcome.HOME: (4.20, 0.26), Outcome.AWAY: (1.80, 0.57)}),
        _result("d", {Outcome.HOME: (1.25, 0.80), Outcome.AWAY: (8.00, 0.14)}),
        _result("e", {Outcome.HOME: (1.50, 0.68)}),
    ]
    picks = themes.underdog_picks(results)

    assert [pick.level for pick in picks] == ["high", "medium", "low"]
    assert picks[0].leg.fixture_id == "a"
    assert picks[1].leg.fixture_id == "c"
    assert picks[1].leg.outcome == Outcome.HOME
    assert picks[2].leg.fixture_id == "d"
    assert picks[2].leg.outcome == Outcome.AWAY
