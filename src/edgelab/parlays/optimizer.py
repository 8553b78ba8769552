"""Smart accumulator search over a pool of analysed fixtures.

The search is a bounded beam search, not an exhaustive enumeration: legs are
ranked by value, partial combinations are extended in rank order and only the
``beam_width`` best partials survive each depth. Results are therefore good
approximations, never a guaranteed global optimum. Work is bounded by
``max_legs * beam_width * candidate_pool_size`` compositions.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from edgelab.analysis.types import AnalysisResult
from edgelab.config import get_settings
from edgelab.parlays.engine import (
    accumulator_probability,
    combine_odds,
    compose_accumulator,
    expected_value,
    leg_from_result,
)
from edgelab.parlays.types import Accumulator, Leg, OptimizerConstraints, RiskLevel

logger = logging.getLogger(__name__)
settings = get_settings()

Partial = tuple[int, ...]


def _risk_ceiling(target: RiskLevel | None) -> float | None:
    if target == RiskLevel.LOW:
        return settings.risk_low_max_odd
    if target == RiskLevel.MEDIUM:
        return settings.risk_medium_max_odd
    return None


def candidate_legs(pool: Iterable[AnalysisResult], limit: int) -> list[Leg]:
    """Best non-skip leg per fixture, ranked by value percentage."""

    best: dict[str, AnalysisResult] = {}
    for result in pool:
        if result.is_skip:
            continue
        current = best.get(result.fixture_id)
        if current is None or result.value_percentage > current.value_percentage:
            best[result.fixture_id] = result
    ranked = sorted(
        best.values(),
        key=lambda r: (-r.value_percentage, -r.confidence, r.fixture_id),
    )
    return [leg_from_result(result) for result in ranked[:limit]]


def _can_extend(partial: Partial, index: int, legs: list[Leg], max_per_league: int) -> bool:
    league = legs[index].league
    used = Counter(legs[i].league for i in partial)
    return used[league] < max_per_league


def _partial_ev(partial: Partial, legs: list[Leg]) -> float:
    chosen = [legs[i] for i in partial]
    return expected_value(accumulator_probability(chosen), combine_odds(chosen))


def rank_accumulators(accumulators: Iterable[Accumulator]) -> list[Accumulator]:
    """Best quality first; equal scores prefer fewer legs."""

    return sorted(
        accumulators,
        key=lambda acc: (-acc.quality_score, acc.leg_count, sorted(acc.fixture_ids)),
    )


def build_smart_accumulators(
    pool: Iterable[AnalysisResult],
    constraints: OptimizerConstraints | None = None,
    *,
    bankroll: float | None = None,
) -> list[Accumulator]:
    """Return up to ``top_k`` distinct accumulators ranked by quality score.

    Skipped fixtures never enter the search. Ties in quality score prefer
    fewer legs.
    """

    constraints = constraints or OptimizerConstraints.from_settings()
    legs = candidate_legs(pool, constraints.candidate_pool_size)
    if len(legs) < constraints.min_legs:
        return []

    ceiling = _risk_ceiling(constraints.target_risk)
    beam: list[Partial] = [()]
    found: dict[frozenset[str], Accumulator] = {}
    evaluated = 0

    for depth in range(1, constraints.max_legs + 1):
        expansions: list[Partial] = []
        for partial in beam:
            start = partial[-1] + 1 if partial else 0
            for index in range(start, len(legs)):
                if not _can_extend(partial, index, legs, constraints.max_legs_per_league):
                    continue
                extended = partial + (index,)
                if ceiling is not None and combine_odds(legs[i] for i in extended) > ceiling:
                    continue
                expansions.append(extended)
        if not expansions:
            break
        expansions.sort(key=lambda p: (-_partial_ev(p, legs), p))
        beam = expansions[: constraints.beam_width]

        if depth < constraints.min_legs:
            continue
        for partial in beam:
            chosen = [legs[i] for i in partial]
            key = frozenset(leg.fixture_id for leg in chosen)
            if key in found:
                continue
            evaluated += 1
            accumulator = compose_accumulator(
                chosen,
                name=f"Smart {depth}-Leg Accumulator",
                bankroll=bankroll,
            )
            if constraints.target_risk is not None and accumulator.risk_level != constraints.target_risk:
                continue
            if accumulator.expected_value < constraints.min_expected_value:
                continue
            accumulator.tags["leagues"] = str(len(accumulator.leagues))
            found[key] = accumulator

    ranked = rank_accumulators(found.values())
    logger.info(
        "Smart accumulator search: %d legs, %d candidates composed, %d kept",
        len(legs),
        evaluated,
        len(ranked),
    )
    return ranked[: constraints.top_k]
