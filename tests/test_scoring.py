"""Scoring pass tests."""

from __future__ import annotations

from datetime import datetime, timezone

from edgelab.analysis.types import Fixture, FixtureFeatures, OddsSet
from edgelab.reports.scoring import run_scoring_pass

LEAGUES = ["Premier League", "La Liga", "Serie A", "Bundesliga", "Ligue 1", "Eredivisie"]


def _pairs() -> list[tuple[Fixture, OddsSet]]:
    pairs = []
    for idx, league in enumerate(LEAGUES):
        features = FixtureFeatures(home_form="WWWWW", away_form="LLLLL") if idx % 3 != 2 else None
        fixture = Fixture(
            fixture_id=f"fx{idx}",
            home_team=f"Home {idx}",
            away_team=f"Away {idx}",
            league=league,
            kickoff=datetime(2026, 10, 24, 12 + idx, 0, tzinfo=timezone.utc),
            features=features,
        )
        pairs.append((fixture, OddsSet(home=1.50, draw=4.00, away=6.50)))
    return pairs


def test_free_tier_report_is_limited() -> None:
    report = run_scoring_pass(_pairs(), tier="free", max_workers=2)
    assert report.tier == "free"
    assert len(report.results) == 3
    assert all(not result.is_skip for result in report.results)
    assert report.smart_accumulators == []
    assert len(report.accumulators) <= 1
    assert len(report.underdog_picks) <= 1


def test_premium_tier_sees_smart_accumulators() -> None:
    report = run_scoring_pass(_pairs(), tier="premium", bankroll=500)
    assert report.tier == "premium"
    assert len(report.results) == len(LEAGUES)
    assert 0 < len(report.smart_accumulators) <= 5
    for acc in report.smart_accumulators:
        assert all(leg.fixture_id not in {"fx2", "fx5"} for leg in acc.legs)
    assert [r.fixture_id for r in report.results][-2:] == ["fx2", "fx5"]
    assert len(report.actionable) == 4


def test_unknown_tier_gets_free_allowance() -> None:
    report = run_scoring_pass(_pairs(), tier="gold")
    assert report.tier == "free"
    assert len(report.results) <= 3
