"""FastAPI surface over the analysis core. Stateless; no storage."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, FastAPI, Header, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from edgelab import __version__
from edgelab.analysis.analyzer import analyze_fixtures, rank_results
from edgelab.analysis.types import AnalysisResult
from edgelab.api.schemas import (
    AccumulatorResponse,
    AnalysisResponse,
    AnalyzeRequest,
    ComposeRequest,
    LegOut,
    ReasonFactorOut,
    ReportRequest,
    ReportResponse,
    SmartRequest,
    UnderdogPickOut,
)
from edgelab.config import get_api_access_key
from edgelab.errors import InvalidLegSetError
from edgelab.parlays.engine import compose_accumulator
from edgelab.parlays.optimizer import build_smart_accumulators
from edgelab.parlays.types import Accumulator, Leg, OptimizerConstraints
from edgelab.reports.scoring import run_scoring_pass

app = FastAPI(
    title="EdgeLab API",
    version="0.1.0",
    description="Value-edge analysis and accumulator composition for football odds.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    expected = get_api_access_key()
    if not x_api_key or x_api_key != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


APIKeyDep = Annotated[None, Depends(require_api_key)]


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, Any]:
    return {"name": "edgelab-football", "version": __version__}


@app.post("/analyze", response_model=list[AnalysisResponse])
def analyze(payload: AnalyzeRequest, _: APIKeyDep) -> list[AnalysisResponse]:
    results = rank_results(analyze_fixtures(f.to_domain() for f in payload.fixtures))
    return [_result_to_response(result) for result in results]


@app.post("/accumulators/compose", response_model=AccumulatorResponse)
def compose(payload: ComposeRequest, _: APIKeyDep) -> AccumulatorResponse:
    legs = [leg.to_domain() for leg in payload.legs]
    try:
        accumulator = compose_accumulator(legs, name=payload.name, bankroll=payload.bankroll)
    except InvalidLegSetError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.reason,
        ) from exc
    return _accumulator_to_response(accumulator)


@app.post("/accumulators/smart", response_model=list[AccumulatorResponse])
def smart(payload: SmartRequest, _: APIKeyDep) -> list[AccumulatorResponse]:
    try:
        constraints = OptimizerConstraints.from_settings(
            min_legs=payload.min_legs,
            max_legs=payload.max_legs,
            target_risk=payload.target_risk,
            max_legs_per_league=payload.max_legs_per_league,
            min_expected_value=payload.min_expected_value,
            top_k=payload.top_k,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    results = analyze_fixtures(f.to_domain() for f in payload.fixtures)
    accumulators = build_smart_accumulators(results, constraints, bankroll=payload.bankroll)
    return [_accumulator_to_response(acc) for acc in accumulators]


@app.post("/report", response_model=ReportResponse)
def report(payload: ReportRequest, _: APIKeyDep) -> ReportResponse:
    scored = run_scoring_pass(
        (f.to_domain() for f in payload.fixtures),
        tier=payload.tier,
        bankroll=payload.bankroll,
    )
    return ReportResponse(
        tier=scored.tier,
        results=[_result_to_response(result) for result in scored.results],
        accumulators=[_accumulator_to_response(acc) for acc in scored.accumulators],
        smart_accumulators=[_accumulator_to_response(acc) for acc in scored.smart_accumulators],
        underdog_picks=[
            UnderdogPickOut(level=pick.level, leg=_leg_to_response(pick.leg))
            for pick in scored.underdog_picks
        ],
    )


def _result_to_response(result: AnalysisResult) -> AnalysisResponse:
    fixture = result.fixture
    return AnalysisResponse(
        fixture_id=fixture.fixture_id,
        home_team=fixture.home_team,
        away_team=fixture.away_team,
        league=fixture.league,
        kickoff=fixture.kickoff,
        recommended_type=result.recommended_type.value,
        status=result.status.value,
        odd=result.odd,
        implied_probability=result.implied_probability,
        estimated_probability=result.estimated_probability,
        value_percentage=result.value_percentage,
        confidence=result.confidence,
        confidence_band=result.confidence_band,
        reason_factors=[
            ReasonFactorOut(
                name=factor.name,
                impact=factor.impact,
                weight=factor.weight,
                description=factor.description,
            )
            for factor in result.reason_factors
        ],
        is_skip=result.is_skip,
        skip_reason=result.skip_reason,
    )


def _leg_to_response(leg: Leg) -> LegOut:
    return LegOut(
        fixture_id=leg.fixture_id,
        match=leg.match,
        league=leg.league,
        outcome=leg.outcome.value,
        selection=leg.selection,
        odd=leg.odd,
        estimated_probability=leg.estimated_probability,
        implied_probability=leg.implied_probability,
        value_percentage=leg.value_percentage,
    )


def _accumulator_to_response(accumulator: Accumulator) -> AccumulatorResponse:
    return AccumulatorResponse(
        name=accumulator.name,
        legs=[_leg_to_response(leg) for leg in accumulator.legs],
        total_odd=accumulator.total_odd,
        combined_probability=accumulator.combined_probability,
        bookmaker_implied_probability=accumulator.bookmaker_implied_probability,
        edge=accumulator.edge,
        expected_value=accumulator.expected_value,
        suggested_stake=accumulator.suggested_stake,
        risk_level=accumulator.risk_level.value,
        quality_score=accumulator.quality_score,
    )
