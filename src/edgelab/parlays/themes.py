"""Themed accumulators and underdog picks built from analysed fixtures."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from edgelab.analysis.types import AnalysisResult, Outcome
from edgelab.parlays.engine import compose_accumulator, leg_from_result
from edgelab.parlays.types import Accumulator, Leg

FAVORITE_ODD_RANGE = (1.60, 2.20)
MIN_OVER_PROBABILITY = 0.5

# (level, lower odd inclusive, upper odd exclusive)
UNDERDOG_BANDS: tuple[tuple[str, float, float], ...] = (
    ("high", 2.5, 3.5),
    ("medium", 3.5, 5.0),
    ("low", 5.0, float("inf")),
)


@dataclass(frozen=True)
class UnderdogPick:
    level: str
    leg: Leg


def _eligible(results: Iterable[AnalysisResult]) -> list[AnalysisResult]:
    return [result for result in results if not result.is_skip]


def favorites_double(
    results: Iterable[AnalysisResult],
    *,
    bankroll: float | None = None,
) -> Accumulator | None:
    """Home favourites priced 1.60-2.20, the two most confident fixtures."""

    low, high = FAVORITE_ODD_RANGE
    candidates = []
    for result in _eligible(results):
        home = result.evaluation_for(Outcome.HOME)
        if home is not None and low <= home.odd <= high:
            candidates.append(result)
    candidates.sort(key=lambda r: (-r.confidence, r.fixture_id))
    if len(candidates) < 2:
        return None
    legs = [leg_from_result(result, Outcome.HOME) for result in candidates[:2]]
    return compose_accumulator(legs, name="Favorites Double", bankroll=bankroll)


def goals_accumulator(
    results: Iterable[AnalysisResult],
    legs: int = 3,
    *,
    bankroll: float | None = None,
) -> Accumulator | None:
    """Over 2.5 goals on the fixtures with the highest estimated over probability."""

    candidates = []
    for result in _eligible(results):
        over = result.evaluation_for(Outcome.OVER)
        if over is not None and over.estimated_probability >= MIN_OVER_PROBABILITY:
            candidates.append((over.estimated_probability, result))
    candidates.sort(key=lambda pair: (-pair[0], pair[1].fixture_id))
    if len(candidates) < 2:
        return None
    chosen = [leg_from_result(result, Outcome.OVER) for _, result in candidates[:legs]]
    return compose_accumulator(chosen, name=f"Over 2.5 Goals x{len(chosen)}", bankroll=bankroll)


def _underdog(result: AnalysisResult) -> Outcome | None:
    home = result.evaluation_for(Outcome.HOME)
    away = result.evaluation_for(Outcome.AWAY)
    if home is None or away is None:
        return None
    return Outcome.AWAY if away.odd > home.odd else Outcome.HOME


def underdog_picks(results: Iterable[AnalysisResult]) -> list[UnderdogPick]:
    """At most one underdog single per chance band, highest estimate first."""

    by_level: dict[str, list[Leg]] = {level: [] for level, _, _ in UNDERDOG_BANDS}
    for result in _eligible(results):
        outcome = _underdog(result)
        if outcome is None:
            continue
        leg = leg_from_result(result, outcome)
        for level, low, high in UNDERDOG_BANDS:
            if low <= leg.odd < high:
                by_level[level].append(leg)
                break

    picks: list[UnderdogPick] = []
    for level, _, _ in UNDERDOG_BANDS:
        legs = sorted(by_level[level], key=lambda leg: (-leg.estimated_probability, leg.fixture_id))
        if legs:
            picks.append(UnderdogPick(level=level, leg=legs[0]))
    return picks
