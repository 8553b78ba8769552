"""Accumulator construction logic."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from edgelab.analysis.types import AnalysisResult, Outcome
from edgelab.config import get_settings
from edgelab.errors import InvalidLegSetError
from edgelab.parlays.types import Accumulator, Leg, RiskLevel

settings = get_settings()

LEG_COUNT_PENALTY = 0.1


def combine_odds(legs: Iterable[Leg]) -> float:
    decimal = 1.0
    for leg in legs:
        decimal *= leg.odd
    return decimal


def accumulator_probability(legs: Iterable[Leg]) -> float:
    prob = 1.0
    for leg in legs:
        prob *= leg.estimated_probability
    return prob


def bookmaker_probability(legs: Iterable[Leg]) -> float:
    prob = 1.0
    for leg in legs:
        prob *= leg.implied_probability
    return prob


def expected_value(prob: float, decimal_odds: float) -> float:
    """Expected profit per unit staked."""

    return prob * decimal_odds - 1.0


def kelly_fraction_for(prob: float, decimal_odds: float) -> float:
    b = decimal_odds - 1.0
    if b <= 0:
        return 0.0
    return max((prob * decimal_odds - 1.0) / b, 0.0)


def classify_risk(
    total_odd: float,
    low_max: float = settings.risk_low_max_odd,
    medium_max: float = settings.risk_medium_max_odd,
) -> RiskLevel:
    if total_odd < low_max:
        return RiskLevel.LOW
    if total_odd <= medium_max:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def stake_cap(risk: RiskLevel) -> float:
    return {
        RiskLevel.LOW: settings.stake_cap_low,
        RiskLevel.MEDIUM: settings.stake_cap_medium,
        RiskLevel.HIGH: settings.stake_cap_high,
    }[risk]


def suggested_stake(
    prob: float,
    decimal_odds: float,
    risk: RiskLevel,
    bankroll: float,
    fraction: float = settings.kelly_fraction,
) -> float:
    """Fractional Kelly, capped by the risk band's share of the bankroll."""

    kelly = kelly_fraction_for(prob, decimal_odds) * fraction
    return round(bankroll * min(kelly, stake_cap(risk)), 2)


def quality_score(ev: float, prob: float, decimal_odds: float, leg_count: int) -> float:
    """EV per unit of return volatility, discounted for each leg beyond two."""

    sigma = decimal_odds * math.sqrt(prob * (1.0 - prob))
    if sigma == 0:
        return 0.0
    penalty = 1.0 + LEG_COUNT_PENALTY * max(leg_count - 2, 0)
    return round(100.0 * ev / (sigma * penalty), 4)


def validate_legs(legs: Sequence[Leg], max_legs: int = settings.accumulator_max_legs) -> None:
    if len(legs) < 2:
        raise InvalidLegSetError(f"an accumulator needs at least 2 legs, got {len(legs)}")
    if len(legs) > max_legs:
        raise InvalidLegSetError(f"an accumulator allows at most {max_legs} legs, got {len(legs)}")
    seen: set[str] = set()
    for leg in legs:
        if leg.fixture_id in seen:
            raise InvalidLegSetError(f"fixture {leg.fixture_id} appears in more than one leg")
        seen.add(leg.fixture_id)
        if not math.isfinite(leg.odd) or leg.odd <= 1.0:
            raise InvalidLegSetError(f"leg on fixture {leg.fixture_id} has invalid odd {leg.odd}")
        for prob in (leg.estimated_probability, leg.implied_probability):
            if not 0.0 <= prob <= 1.0:
                raise InvalidLegSetError(
                    f"leg on fixture {leg.fixture_id} has probability {prob} outside [0, 1]"
                )


def compose_accumulator(
    legs: Sequence[Leg],
    *,
    name: str | None = None,
    bankroll: float | None = None,
) -> Accumulator:
    """Combine an ordered leg list into an accumulator.

    Raises InvalidLegSetError for fewer than two legs, too many legs,
    duplicate fixtures or out-of-range leg values.
    """

    validate_legs(legs)
    legs = list(legs)
    bankroll = settings.default_bankroll if bankroll is None else bankroll
    total_odd = combine_odds(legs)
    prob = accumulator_probability(legs)
    book_prob = bookmaker_probability(legs)
    ev = expected_value(prob, total_odd)
    risk = classify_risk(total_odd)
    return Accumulator(
        name=name or f"{len(legs)}-Leg Accumulator",
        legs=legs,
        total_odd=total_odd,
        combined_probability=prob,
        bookmaker_implied_probability=book_prob,
        edge=prob - book_prob,
        expected_value=ev,
        suggested_stake=suggested_stake(prob, total_odd, risk, bankroll),
        risk_level=risk,
        quality_score=quality_score(ev, prob, total_odd, len(legs)),
    )


def leg_from_result(result: AnalysisResult, outcome: Outcome | None = None) -> Leg:
    """Turn an analysis result (or one of its evaluated outcomes) into a leg."""

    if result.is_skip:
        raise InvalidLegSetError(f"fixture {result.fixture_id} was skipped and cannot be a leg")
    outcome = outcome or result.outcome
    evaluation = result.evaluation_for(outcome)
    if evaluation is None:
        raise InvalidLegSetError(f"fixture {result.fixture_id} has no {outcome.value} market")
    fixture = result.fixture
    return Leg(
        fixture_id=fixture.fixture_id,
        home_team=fixture.home_team,
        away_team=fixture.away_team,
        league=fixture.league,
        outcome=evaluation.outcome,
        odd=evaluation.odd,
        estimated_probability=evaluation.estimated_probability,
        implied_probability=evaluation.implied_probability,
        value_percentage=evaluation.value_percentage,
        confidence=result.confidence,
    )

