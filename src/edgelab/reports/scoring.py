"""Scoring pass: fixtures in, tier-limited analysis report out."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from edgelab.analysis.analyzer import analyze_fixtures, rank_results
from edgelab.analysis.types import AnalysisResult, Fixture, OddsSet
from edgelab.errors import InvalidLegSetError
from edgelab.parlays.optimizer import build_smart_accumulators
from edgelab.parlays.themes import UnderdogPick, favorites_double, goals_accumulator, underdog_picks
from edgelab.parlays.types import Accumulator, OptimizerConstraints
from edgelab.tiers.gate import TierConfig, gate_report, resolve_tier

logger = logging.getLogger(__name__)


@dataclass
class ScoringReport:
    tier: str
    results: list[AnalysisResult] = field(default_factory=list)
    accumulators: list[Accumulator] = field(default_factory=list)
    smart_accumulators: list[Accumulator] = field(default_factory=list)
    underdog_picks: list[UnderdogPick] = field(default_factory=list)

    @property
    def actionable(self) -> list[AnalysisResult]:
        return [result for result in self.results if not result.is_skip]


def themed_accumulators(
    results: list[AnalysisResult],
    bankroll: float | None = None,
) -> list[Accumulator]:
    accumulators: list[Accumulator] = []
    for builder in (favorites_double, goals_accumulator):
        try:
            accumulator = builder(results, bankroll=bankroll)
        except InvalidLegSetError as exc:
            logger.warning("Dropping %s: %s", builder.__name__, exc.reason)
            continue
        if accumulator is not None:
            accumulators.append(accumulator)
    return accumulators


def run_scoring_pass(
    fixtures: Iterable[tuple[Fixture, OddsSet]],
    *,
    tier: str | TierConfig = "free",
    constraints: OptimizerConstraints | None = None,
    bankroll: float | None = None,
    max_workers: int | None = None,
) -> ScoringReport:
    """Run the full analysis for one request and apply the caller's tier."""

    tier_config = tier if isinstance(tier, TierConfig) else resolve_tier(tier)
    results = rank_results(analyze_fixtures(fixtures, max_workers=max_workers))
    smart: list[Accumulator] = []
    if tier_config.smart_accumulators_visible:
        smart = build_smart_accumulators(results, constraints, bankroll=bankroll)
    full = ScoringReport(
        tier=tier_config.name,
        results=results,
        accumulators=themed_accumulators(results, bankroll),
        smart_accumulators=smart,
        underdog_picks=underdog_picks(results),
    )
    return gate_report(full, tier_config)
