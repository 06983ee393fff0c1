"""POST /api/risk/analyze - Best/base/worst scenario comparison"""

import time
import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic.alias_generators import to_camel

from finrisk_engine.api.v1.schemas import (
    ParameterValidationResponse,
    ScenarioComparisonResponse,
    ScenarioParametersSchema,
)
from finrisk_engine.api.dependencies import get_account_repository, get_request_id
from finrisk_engine.config import settings
from finrisk_engine.domain.exceptions import InvalidScenarioInput
from finrisk_engine.domain.risk import check_parameter_limits, parse_scenario_parameters
from finrisk_engine.domain.scenarios import analyze_risk
from finrisk_engine.infrastructure.database.repositories import AccountRepository
from finrisk_engine.infrastructure.observability.metrics import risk_level_counter, record_validation_failure
from finrisk_engine.infrastructure.observability.logging import log_analysis

router = APIRouter()


@router.post("/risk/analyze", response_model=ScenarioComparisonResponse)
def analyze_risk_scenarios(
    request_body: ScenarioParametersSchema,
    request_id: str = Depends(get_request_id),
    accounts: AccountRepository = Depends(get_account_repository),
):
    """
    Score best, base and worst scenarios around the caller's deltas.

    Flow:
    1. Validate parameters
    2. Take base cash from account balances (fallback when there are none)
    3. Derive best (x0.5) and worst (x1.5) legs and score all three
    4. Return tier and recommendations from the base leg
    """
    start_time = time.time()

    try:
        params = parse_scenario_parameters(request_body.model_dump())

        state = accounts.get_financial_state()
        base_cash = state.cash if state is not None else settings.fallback_base_cash

        comparison = analyze_risk(base_cash, params)

    except InvalidScenarioInput as e:
        record_validation_failure(e)
        logging.warning(f"Invalid scenario input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    risk_level_counter.labels(risk_level=comparison.risk_level.level).inc()
    log_analysis(
        request_id,
        "risk",
        comparison.risk_level.level,
        (time.time() - start_time) * 1000,
        score=str(comparison.base.score),
    )

    return ScenarioComparisonResponse.from_domain(comparison, base_cash)


@router.get("/risk/parameters/validate", response_model=ParameterValidationResponse)
def validate_risk_parameters(
    fx_delta: Decimal = Query(Decimal("0"), alias="fxDelta"),
    rate_delta: Decimal = Query(Decimal("0"), alias="rateDelta"),
    inflation_delta: Decimal = Query(Decimal("0"), alias="inflationDelta"),
    liquidity_gap: Decimal = Query(Decimal("0"), alias="liquidityGap"),
    request_id: str = Depends(get_request_id),
):
    """Check each parameter against its advisory slider range"""
    try:
        params = parse_scenario_parameters(
            {
                "fx_delta": fx_delta,
                "rate_delta": rate_delta,
                "inflation_delta": inflation_delta,
                "liquidity_gap": liquidity_gap,
            }
        )
    except InvalidScenarioInput as e:
        record_validation_failure(e)
        logging.warning(f"Invalid scenario input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    report = check_parameter_limits(params)
    return ParameterValidationResponse(
        valid=all(check["valid"] for check in report.values()),
        validation={to_camel(name): check for name, check in report.items()},
    )
