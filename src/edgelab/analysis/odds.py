"""Odds normalisation: implied probabilities and margin removal."""

from __future__ import annotations

import logging
import math

from edgelab.analysis.types import (
    MARKET_GROUPS,
    MarketProbabilities,
    MarketProbability,
    OddsSet,
    Outcome,
)
from edgelab.errors import MissingMarketError

logger = logging.getLogger(__name__)


def implied_probability(odd: float) -> float:
    """Convert a decimal odd into its raw (vig-inclusive) implied probability."""

    return 1.0 / odd


def _valid_odd(odd: float | None) -> bool:
    return odd is not None and math.isfinite(odd) and odd > 1.0


def _group_prices(odds_set: OddsSet, group: str) -> dict[Outcome, float]:
    prices: dict[Outcome, float] = {}
    for outcome in MARKET_GROUPS[group]:
        odd = odds_set.price(outcome)
        if not odd:
            raise MissingMarketError(group, f"{outcome.value} odd is missing")
        if not _valid_odd(odd):
            raise MissingMarketError(group, f"{outcome.value} odd {odd!r} is not a finite price above 1.0")
        prices[outcome] = float(odd)
    return prices


def devig(implied: dict[Outcome, float]) -> dict[Outcome, float]:
    """Proportionally normalise a mutually exclusive group so it sums to 1."""

    total = sum(implied.values())
    return {outcome: prob / total for outcome, prob in implied.items()}


def normalize_odds(odds_set: OddsSet) -> MarketProbabilities:
    """Return implied and de-vigged probabilities for every available group.

    A group with any absent or invalid odd is excluded as a whole and listed
    in ``unavailable``; it never contributes a 0% probability.
    """

    market = MarketProbabilities()
    for group in MARKET_GROUPS:
        try:
            prices = _group_prices(odds_set, group)
        except MissingMarketError as exc:
            logger.debug("Market unavailable: %s", exc)
            market.unavailable[group] = exc.reason
            continue
        implied = {outcome: implied_probability(odd) for outcome, odd in prices.items()}
        for outcome, devigged in devig(implied).items():
            market.probabilities[outcome] = MarketProbability(
                outcome=outcome,
                group=group,
                odd=prices[outcome],
                implied=implied[outcome],
                devigged=devigged,
            )
    return market


def overround(odds_set: OddsSet, group: str) -> float | None:
    """Bookmaker margin of a group (sum of implied probabilities minus one)."""

    try:
        prices = _group_prices(odds_set, group)
    except MissingMarketError:
        return None
    return sum(implied_probability(odd) for odd in prices.values()) - 1.0
