"""Odds normalisation tests."""

from __future__ import annotations

import pytest

from edgelab.analysis import odds
from edgelab.analysis.types import MARKET_GROUPS, OddsSet, Outcome


def _full_odds() -> OddsSet:
    return OddsSet(
        home=1.50,
        draw=4.00,
        away=6.50,
        over=1.85,
        under=1.95,
        btts_yes=1.72,
        btts_no=2.05,
    )


def test_implied_probability_is_reciprocal() -> None:
    assert odds.implied_probability(2.0) == pytest.approx(0.5)
    assert odds.implied_probability(1.25) == pytest.approx(0.8)


def test_devig_removes_margin_proportionally() -> None:
    market = odds.normalize_odds(OddsSet(home=1.50, draw=4.00, away=6.50))
    assert market[Outcome.HOME].devigged == pytest.approx(0.6228, abs=1e-4)
    assert market[Outcome.DRAW].devigged == pytest.approx(0.2335, abs=1e-4)
    assert market[Outcome.AWAY].devigged == pytest.approx(0.1437, abs=1e-4)
    assert market[Outcome.HOME].implied == pytest.approx(1 / 1.50)


def test_every_available_group_sums_to_one() -> None:
    market = odds.normalize_odds(_full_odds())
    for group in MARKET_GROUPS:
        assert market.group_total(group) == pytest.approx(1.0, abs=1e-9)


def test_group_with_missing_odd_is_unavailable() -> None:
    market = odds.normalize_odds(OddsSet(home=2.10, draw=3.30, away=3.60, over=1.90))
    assert "total_goals" in market.unavailable
    assert "btts" in market.unavailable
    assert Outcome.OVER not in market
    assert Outcome.HOME in market


def test_zero_or_sub_unit_odd_never_becomes_a_probability() -> None:
    market = odds.normalize_odds(OddsSet(home=0, draw=3.30, away=1.0))
    assert market.is_empty()
    assert market.unavailable["match_result"]


def test_empty_odds_set_yields_empty_market() -> None:
    market = odds.normalize_odds(OddsSet())
    assert market.is_empty()
    assert set(market.unavailable) == set(MARKET_GROUPS)


def test_overround_reports_bookmaker_margin() -> None:
    margin = odds.overround(OddsSet(home=1.50, draw=4.00, away=6.50), "match_result")
    assert margin == pytest.approx(0.0705, abs=1e-4)
    assert odds.overround(OddsSet(home=1.50), "match_result") is None


def test_from_mapping_ignores_unknown_keys() -> None:
    odds_set = OddsSet.from_mapping({"home": 1.9, "draw": 3.4, "away": 4.2, "corners": 1.8})
    assert odds_set.price(Outcome.HOME) == 1.9
    assert odds_set.over is None


def test_infinite_odds_are_unavailable() -> None:
    inf = float("inf")
    assert odds.normalize_odds(OddsSet(home=inf, draw=inf, away=inf)).is_empty()
    market = odds.normalize_odds(OddsSet(home=1.5, draw=4.0, away=inf, over=1.85, under=1.95))
    assert "match_result" in market.unavailable
    assert Outcome.AWAY not in market
    assert market.group_total("total_goals") == pytest.approx(1.0)


def test_nan_odd_is_unavailable() -> None:
    market = odds.normalize_odds(OddsSet(home=float("nan"), draw=3.3, away=3.6))
    assert market.is_empty()
