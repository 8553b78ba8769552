"""Backtest settlement tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from edgelab.analysis.types import AnalysisResult, Fixture, Outcome, RecommendedType
from edgelab.backtest import evaluation
from edgelab.backtest.evaluation import MatchScore
from edgelab.parlays.engine import compose_accumulator
from edgelab.parlays.types import Leg


def _result(fixture_id: str, outcome: Outcome | None, odd: float = 2.0, prob: float = 0.55) -> AnalysisResult:
    skip = outcome is None
    return AnalysisResult(
        fixture=Fixture(
            fixture_id=fixture_id,
            home_team="H",
            away_team="A",
            league="L",
            kickoff=datetime(2026, 10, 18, tzinfo=timezone.utc),
        ),
        recommended_type=RecommendedType.SKIP if skip else {
            Outcome.HOME: RecommendedType.HOME_WIN,
            Outcome.OVER: RecommendedType.OVER,
        }[outcome],
        outcome=outcome,
        odd=None if skip else odd,
        implied_probability=0.5,
        estimated_probability=prob,
        value_percentage=5.0,
        confidence=0 if skip else 55,
        is_skip=skip,
    )


@pytest.mark.parametrize(
    ("outcome", "score", "expected"),
    [
        (Outcome.HOME, MatchScore(2, 1), True),
        (Outcome.AWAY, MatchScore(2, 1), False),
        (Outcome.DRAW, MatchScore(1, 1), True),
        (Outcome.OVER, MatchScore(2, 1), True),
        (Outcome.UNDER, MatchScore(1, 1), True),
        (Outcome.BTTS_YES, MatchScore(1, 0), False),
        (Outcome.BTTS_NO, MatchScore(0, 0), True),
    ],
)
def test_outcome_hit(outcome: Outcome, score: MatchScore, expected: bool) -> None:
    assert evaluation.outcome_hit(outcome, score) is expected


def test_skips_and_unscored_fixtures_are_not_settled() -> None:
    results = [_result("a", Outcome.HOME), _result("b", None), _result("c", Outcome.OVER)]
    settled = evaluation.settle_results(results, {"a": MatchScore(1, 0), "b": MatchScore(0, 0)})
    assert [bet.fixture_id for bet in settled] == ["a"]
    assert settled[0].hit
    assert settled[0].roi_unit == pytest.approx(1.0)


def test_summary_has_per_type_and_overall_rows() -> None:
    results = [
        _result("a", Outcome.HOME, odd=2.0),
        _result("b", Outcome.HOME, odd=2.0),
        _result("c", Outcome.OVER, odd=1.8),
    ]
    scores = {"a": MatchScore(2, 0), "b": MatchScore(0, 1), "c": MatchScore(2, 2)}
    summary = evaluation.summarize_backtest(evaluation.settle_results(results, scores))

    assert list(summary.columns) == evaluation.SUMMARY_COLUMNS
    rows = summary.set_index("recommended_type")
    assert rows.loc["HOME_WIN", "bets"] == 2
    assert rows.loc["HOME_WIN", "hit_rate"] == pytest.approx(0.5)
    assert rows.loc["HOME_WIN", "roi"] == pytest.approx(0.0)
    assert rows.loc["OVER", "roi"] == pytest.approx(0.8)
    assert rows.loc["ALL", "bets"] == 3
    assert rows.loc["ALL", "hits"] == 2


def test_empty_summary_keeps_columns() -> None:
    summary = evaluation.summarize_backtest([])
    assert summary.empty
    assert list(summary.columns) == evaluation.SUMMARY_COLUMNS
    assert evaluation.calibration_metrics([]) == {}


def test_calibration_metrics() -> None:
    results = [_result("a", Outcome.HOME, prob=0.8), _result("b", Outcome.HOME, prob=0.3)]
    settled = evaluation.settle_results(results, {"a": MatchScore(1, 0), "b": MatchScore(0, 0)})
    metrics = evaluation.calibration_metrics(settled)
    assert metrics["brier"] == pytest.approx(0.065)
    assert metrics["accuracy"] == pytest.approx(1.0)
    assert metrics["log_loss"] > 0


def _leg(fixture_id: str, outcome: Outcome) -> Leg:
    return Leg(
        fixture_id=fixture_id,
        home_team="H",
        away_team="A",
        league="L",
        outcome=outcome,
        odd=1.9,
        estimated_probability=0.58,
        implied_probability=0.52,
    )


def test_accumulator_settles_only_when_every_leg_wins() -> None:
    acc = compose_accumulator([_leg("a", Outcome.HOME), _leg("b", Outcome.OVER)])
    assert evaluation.settle_accumulator(acc, {"a": MatchScore(1, 0)}) is None

    won = evaluation.settle_accumulator(acc, {"a": MatchScore(1, 0), "b": MatchScore(2, 1)})
    assert won is not None and won.hit
    assert won.fixture_id == "a+b"
    assert won.roi_unit == pytest.approx(1.9 * 1.9 - 1)

    lost = evaluation.settle_accumulator(acc, {"a": MatchScore(1, 0), "b": MatchScore(1, 0)})
    assert lost is not None and not lost.hit
