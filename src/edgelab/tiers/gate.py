"""Subscription tier limits applied to analysis output."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from edgelab.analysis.types import AnalysisResult
from edgelab.parlays.types import Accumulator

if TYPE_CHECKING:
    from edgelab.reports.scoring import ScoringReport

logger = logging.getLogger(__name__)

CONFIDENCE_BANDS = ("high", "medium", "low")


@dataclass(frozen=True)
class TierConfig:
    name: str
    max_single_bets: int
    max_accumulators: int
    smart_accumulators_visible: bool = False
    max_smart_accumulators: int = 0
    max_underdog_picks: int = 1
    confidence_filter_enabled: bool = False


DEFAULT_TIERS: dict[str, TierConfig] = {
    "free": TierConfig(name="free", max_single_bets=3, max_accumulators=1),
    "basic": TierConfig(name="basic", max_single_bets=10, max_accumulators=3),
    "advanced": TierConfig(
        name="advanced",
        max_single_bets=25,
        max_accumulators=6,
        max_underdog_picks=3,
        confidence_filter_enabled=True,
    ),
    "premium": TierConfig(
        name="premium",
        max_single_bets=50,
        max_accumulators=10,
        smart_accumulators_visible=True,
        max_smart_accumulators=5,
        max_underdog_picks=3,
        confidence_filter_enabled=True,
    ),
}


def resolve_tier(name: str | None, tiers: dict[str, TierConfig] | None = None) -> TierConfig:
    """Look up a tier by name; unknown names get the free allowance."""

    tiers = tiers or DEFAULT_TIERS
    key = (name or "free").strip().lower()
    if key not in tiers:
        logger.warning("Unknown tier %r, falling back to free", name)
        return tiers["free"]
    return tiers[key]


def apply_tier_limits(
    results: Sequence[AnalysisResult],
    accumulators: Sequence[Accumulator],
    tier_config: TierConfig,
) -> tuple[list[AnalysisResult], list[Accumulator]]:
    """Truncate results and accumulators to the tier's allowance."""

    return (
        list(results[: max(tier_config.max_single_bets, 0)]),
        list(accumulators[: max(tier_config.max_accumulators, 0)]),
    )


def visible_smart_accumulators(
    smart_accumulators: Sequence[Accumulator],
    tier_config: TierConfig,
) -> list[Accumulator]:
    if not tier_config.smart_accumulators_visible:
        return []
    return list(smart_accumulators[: max(tier_config.max_smart_accumulators, 0)])


def filter_by_confidence(
    results: Sequence[AnalysisResult],
    band: str,
    tier_config: TierConfig,
) -> list[AnalysisResult]:
    """Keep results in a confidence band; tiers without the filter see everything."""

    if band not in CONFIDENCE_BANDS:
        raise ValueError(f"Unknown confidence band '{band}'")
    if not tier_config.confidence_filter_enabled:
        return list(results)
    return [result for result in results if result.confidence_band == band]


def gate_report(report: "ScoringReport", tier_config: TierConfig) -> "ScoringReport":
    results, accumulators = apply_tier_limits(report.results, report.accumulators, tier_config)
    return replace(
        report,
        tier=tier_config.name,
        results=results,
        accumulators=accumulators,
        smart_accumulators=visible_smart_accumulators(report.smart_accumulators, tier_config),
        underdog_picks=list(report.underdog_picks[: max(tier_config.max_underdog_picks, 0)]),
    )
