"""GET /api/dashboard/{runway,overview,forecast} - Cash runway and combined dashboard views"""

import time
import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from finrisk_engine.api.v1.schemas import (
    CashFlowForecastResponse,
    DashboardOverviewResponse,
    ForecastMonthSchema,
    RunwayResponse,
)
from finrisk_engine.api.dependencies import (
    get_account_repository,
    get_ledger_repository,
    get_reference_date,
    get_request_id,
)
from finrisk_engine.config import settings
from finrisk_engine.domain.cashgap import analyze_cash_gap
from finrisk_engine.domain.exceptions import InvalidAgingRecord, InvalidHorizon, InvalidScenarioInput
from finrisk_engine.domain.runway import analyze_runway, build_dashboard_overview, forecast_cash_flow
from finrisk_engine.infrastructure.database.repositories import AccountRepository, LedgerRepository
from finrisk_engine.infrastructure.observability.metrics import (
    dashboard_risk_counter,
    record_validation_failure,
    runway_status_counter,
)
from finrisk_engine.infrastructure.observability.logging import log_analysis

router = APIRouter()


def _current_cash(accounts: AccountRepository) -> Decimal:
    """Liquid cash across accounts; zero when none exist"""
    state = accounts.get_financial_state()
    return state.cash if state is not None else Decimal("0")


def _reject(e: Exception, request_id: str, what: str) -> HTTPException:
    record_validation_failure(e)
    logging.warning(f"Invalid {what} input: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=400, detail=str(e))


@router.get("/dashboard/runway", response_model=RunwayResponse)
def get_runway(
    monthly_expenses: Decimal = Query(..., alias="monthlyExpenses", description="Average monthly outflow"),
    months: Optional[int] = Query(None, description="Breakdown length in months"),
    request_id: str = Depends(get_request_id),
    as_of: date = Depends(get_reference_date),
    accounts: AccountRepository = Depends(get_account_repository),
):
    """
    How long current cash lasts at the caller's monthly burn.

    Returns runway in months and days, a status and a monthly breakdown.
    """
    start_time = time.time()
    months = months if months is not None else settings.runway_default_months

    try:
        runway = analyze_runway(_current_cash(accounts), monthly_expenses, as_of, months)
    except (InvalidHorizon, InvalidScenarioInput) as e:
        raise _reject(e, request_id, "runway")

    runway_status_counter.labels(status=runway.status).inc()
    log_analysis(
        request_id,
        "runway",
        runway.status,
        (time.time() - start_time) * 1000,
        runway_months=str(runway.runway_months),
    )

    return RunwayResponse.from_domain(runway)


@router.get("/dashboard/overview", response_model=DashboardOverviewResponse)
def get_dashboard_overview(
    monthly_expenses: Decimal = Query(..., alias="monthlyExpenses", description="Average monthly outflow"),
    request_id: str = Depends(get_request_id),
    as_of: date = Depends(get_reference_date),
    accounts: AccountRepository = Depends(get_account_repository),
    ledger: LedgerRepository = Depends(get_ledger_repository),
):
    """
    Runway and cash gap side by side.

    The overall tier is critical when either side is critical, high when
    the runway is in warning or the cash gap is high, medium when the cash
    gap is medium, and low otherwise.
    """
    start_time = time.time()

    try:
        runway = analyze_runway(_current_cash(accounts), monthly_expenses, as_of, settings.runway_default_months)
        cash_gap = analyze_cash_gap(
            ledger.list_items("receivable"),
            ledger.list_items("payable"),
            as_of,
            settings.cash_gap_default_months,
        )
        overview = build_dashboard_overview(runway, cash_gap)
    except (InvalidHorizon, InvalidScenarioInput, InvalidAgingRecord) as e:
        raise _reject(e, request_id, "dashboard")

    dashboard_risk_counter.labels(risk_level=overview.overall_risk).inc()
    log_analysis(
        request_id,
        "dashboard",
        overview.overall_risk,
        (time.time() - start_time) * 1000,
        runway_status=runway.status,
        cash_gap_level=cash_gap.risk_level,
    )

    return DashboardOverviewResponse.from_domain(overview, as_of)


@router.get("/dashboard/forecast", response_model=CashFlowForecastResponse)
def get_cash_flow_forecast(
    monthly_expenses: Decimal = Query(..., alias="monthlyExpenses", description="Average monthly outflow"),
    months: Optional[int] = Query(None, description="Forecast length in months"),
    request_id: str = Depends(get_request_id),
    as_of: date = Depends(get_reference_date),
    accounts: AccountRepository = Depends(get_account_repository),
    ledger: LedgerRepository = Depends(get_ledger_repository),
):
    """
    Opening and closing cash per month.

    Inflows come from receivables due in the month; outflows are the
    monthly expenses plus payables due in the month.
    """
    start_time = time.time()
    months = months if months is not None else settings.runway_default_months

    try:
        cash_gap = analyze_cash_gap(ledger.list_items("receivable"), ledger.list_items("payable"), as_of, months)
        forecast = forecast_cash_flow(_current_cash(accounts), monthly_expenses, cash_gap.timeline)
    except (InvalidHorizon, InvalidScenarioInput, InvalidAgingRecord) as e:
        raise _reject(e, request_id, "forecast")

    first_negative = next((m.period for m in forecast if m.closing_cash < 0), None)
    log_analysis(
        request_id,
        "forecast",
        "shortfall" if first_negative is not None else "covered",
        (time.time() - start_time) * 1000,
        months=months,
        first_negative_period=first_negative,
    )

    return CashFlowForecastResponse(
        months=[ForecastMonthSchema.from_domain(m) for m in forecast],
        as_of=as_of,
    )
