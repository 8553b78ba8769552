"""Settle recommendations against final scores and summarise performance."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, brier_score_loss, log_loss

from edgelab.analysis.types import AnalysisResult, Outcome
from edgelab.parlays.types import Accumulator

SUMMARY_COLUMNS = ["recommended_type", "bets", "hits", "hit_rate", "roi"]


@dataclass(frozen=True)
class MatchScore:
    home_goals: int
    away_goals: int

    @property
    def total_goals(self) -> int:
        return self.home_goals + self.away_goals


@dataclass(frozen=True)
class SettledBet:
    fixture_id: str
    recommended_type: str
    odd: float
    estimated_probability: float
    hit: bool
    roi_unit: float


def outcome_hit(outcome: Outcome, score: MatchScore) -> bool:
    both_scored = score.home_goals > 0 and score.away_goals > 0
    if outcome == Outcome.HOME:
        return score.home_goals > score.away_goals
    if outcome == Outcome.AWAY:
        return score.away_goals > score.home_goals
    if outcome == Outcome.DRAW:
        return score.home_goals == score.away_goals
    if outcome == Outcome.OVER:
        return score.total_goals > 2.5
    if outcome == Outcome.UNDER:
        return score.total_goals < 2.5
    if outcome == Outcome.BTTS_YES:
        return both_scored
    return not both_scored


def unit_roi(hit: bool, odd: float) -> float:
    return odd - 1.0 if hit else -1.0


def settle_result(result: AnalysisResult, score: MatchScore) -> SettledBet | None:
    """Settle one recommendation; skipped fixtures have nothing to settle."""

    if result.is_skip or result.outcome is None or result.odd is None:
        return None
    hit = outcome_hit(result.outcome, score)
    return SettledBet(
        fixture_id=result.fixture_id,
        recommended_type=result.recommended_type.value,
        odd=result.odd,
        estimated_probability=result.estimated_probability,
        hit=hit,
        roi_unit=unit_roi(hit, result.odd),
    )


def settle_results(
    results: Iterable[AnalysisResult],
    scores: Mapping[str, MatchScore],
) -> list[SettledBet]:
    settled: list[SettledBet] = []
    for result in results:
        score = scores.get(result.fixture_id)
        if score is None:
            continue
        bet = settle_result(result, score)
        if bet is not None:
            settled.append(bet)
    return settled


def settle_accumulator(
    accumulator: Accumulator,
    scores: Mapping[str, MatchScore],
) -> SettledBet | None:
    """An accumulator wins only if every leg wins; unsettled while any score is missing."""

    if any(leg.fixture_id not in scores for leg in accumulator.legs):
        return None
    hit = all(outcome_hit(leg.outcome, scores[leg.fixture_id]) for leg in accumulator.legs)
    return SettledBet(
        fixture_id="+".join(leg.fixture_id for leg in accumulator.legs),
        recommended_type="ACCUMULATOR",
        odd=accumulator.total_odd,
        estimated_probability=accumulator.combined_probability,
        hit=hit,
        roi_unit=unit_roi(hit, accumulator.total_odd),
    )


def summarize_backtest(settled: Iterable[SettledBet]) -> pd.DataFrame:
    """Bets, hits, hit rate and ROI per recommended type plus an ``ALL`` row."""

    df = pd.DataFrame([asdict(bet) for bet in settled])
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    grouped = df.groupby("recommended_type").agg(
        bets=("hit", "size"),
        hits=("hit", "sum"),
        roi=("roi_unit", "mean"),
    )
    grouped.loc["ALL"] = [len(df), int(df["hit"].sum()), float(df["roi_unit"].mean())]
    grouped["hit_rate"] = grouped["hits"] / grouped["bets"]
    return grouped.rename_axis("recommended_type").reset_index()[SUMMARY_COLUMNS]


def calibration_metrics(settled: Iterable[SettledBet]) -> dict[str, float]:
    """Brier score, log loss and accuracy of the estimated probabilities."""

    bets = list(settled)
    if not bets:
        return {}
    y_true = np.array([int(bet.hit) for bet in bets])
    y_pred = np.array([bet.estimated_probability for bet in bets])
    return {
        "brier": float(brier_score_loss(y_true, y_pred)),
        "log_loss": float(log_loss(y_true, y_pred, labels=[0, 1])),
        "accuracy": float(accuracy_score(y_true, (y_pred > 0.5).astype(int))),
    }
