"""POST /api/simulation/run - Forward projection of cash, debt and net worth"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from finrisk_engine.api.v1.schemas import (
    SimulationHistoryItem,
    SimulationHistoryResponse,
    SimulationRequest,
    SimulationResponse,
)
from finrisk_engine.api.dependencies import (
    get_account_repository,
    get_request_id,
    get_simulation_run_repository,
)
from finrisk_engine.config import settings
from finrisk_engine.domain.exceptions import InvalidHorizon, InvalidScenarioInput
from finrisk_engine.domain.risk import parse_scenario_parameters
from finrisk_engine.domain.simulation import run_simulation
from finrisk_engine.infrastructure.database.repositories import AccountRepository, SimulationRunRepository
from finrisk_engine.infrastructure.database.session import get_db
from finrisk_engine.infrastructure.observability.metrics import record_simulation, record_validation_failure
from finrisk_engine.infrastructure.observability.logging import log_analysis

router = APIRouter()


@router.post("/simulation/run", response_model=SimulationResponse)
def run_forward_simulation(
    request_body: SimulationRequest,
    request_id: str = Depends(get_request_id),
    db: Session = Depends(get_db),
    accounts: AccountRepository = Depends(get_account_repository),
    runs: SimulationRunRepository = Depends(get_simulation_run_repository),
):
    """
    Project the current position forward under a scenario.

    Flow:
    1. Aggregate account balances into cash, debt and net worth (404 if none)
    2. Validate parameters and horizon
    3. Run the month-by-month projection
    4. Persist the run and return it with its id
    """
    start_time = time.time()

    state = accounts.get_financial_state()
    if state is None:
        raise HTTPException(status_code=404, detail="At least one account is required to run a simulation")

    try:
        params = parse_scenario_parameters(
            {
                "fx_delta": request_body.fx_delta,
                "rate_delta": request_body.rate_delta,
                "inflation_delta": request_body.inflation_delta,
                "liquidity_gap": 0,
            }
        )

        result = run_simulation(
            state,
            params,
            request_body.horizon_months,
            monthly_net_cash_flow=request_body.monthly_net_cash_flow,
            foreign_currency_share=settings.foreign_currency_share,
        )

        response = SimulationResponse.from_domain(result)
        payload = response.model_dump(mode="json", by_alias=True)
        db_run = runs.create_run(
            horizon_months=result.horizon_months,
            parameters=payload["parameters"],
            results={key: payload[key] for key in ("currentState", "projections", "summary", "narrative")},
            cash_deficit_month=result.summary.cash_deficit_month,
        )
        db.commit()

    except (InvalidScenarioInput, InvalidHorizon) as e:
        db.rollback()
        record_validation_failure(e)
        logging.warning(f"Invalid simulation input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_simulation(result.horizon_months, result.summary.cash_deficit_month)
    log_analysis(
        request_id,
        "simulation",
        "deficit" if result.summary.cash_deficit_month is not None else "solvent",
        (time.time() - start_time) * 1000,
        horizon_months=result.horizon_months,
        cash_deficit_month=result.summary.cash_deficit_month,
    )

    response.id = str(db_run.id)
    return response


@router.get("/simulation/history", response_model=SimulationHistoryResponse)
def get_simulation_history(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum runs to return"),
    runs: SimulationRunRepository = Depends(get_simulation_run_repository),
):
    """
    Retrieve recent simulation runs.

    Returns:
        Runs newest first, with their parameters and deficit month
    """
    db_runs = runs.list_runs(limit=limit or settings.simulation_history_limit)

    return SimulationHistoryResponse(
        runs=[
            SimulationHistoryItem(
                id=str(run.id),
                horizon_months=run.horizon_months,
                cash_deficit_month=run.cash_deficit_month,
                parameters=run.parameters,
                created_at=run.created_at.isoformat(),
            )
            for run in db_runs
        ]
    )
