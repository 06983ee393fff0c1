"""GET /api/dashboard/cashgap - AR vs AP cash gap analysis"""

import time
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from finrisk_engine.api.v1.schemas import CashGapResponse
from finrisk_engine.api.dependencies import get_ledger_repository, get_reference_date, get_request_id
from finrisk_engine.config import settings
from finrisk_engine.domain.cashgap import analyze_cash_gap
from finrisk_engine.domain.exceptions import InvalidAgingRecord, InvalidHorizon
from finrisk_engine.infrastructure.database.repositories import LedgerRepository
from finrisk_engine.infrastructure.observability.metrics import cash_gap_level_counter, record_validation_failure
from finrisk_engine.infrastructure.observability.logging import log_analysis

router = APIRouter()


@router.get("/dashboard/cashgap", response_model=CashGapResponse)
def get_cash_gap(
    months: Optional[int] = Query(None, description="Timeline length in months"),
    request_id: str = Depends(get_request_id),
    as_of: date = Depends(get_reference_date),
    ledger: LedgerRepository = Depends(get_ledger_repository),
):
    """
    Reconcile outstanding receivables against payables.

    Returns 30/60-day net gaps, a risk tier and a monthly timeline.
    """
    start_time = time.time()
    months = months if months is not None else settings.cash_gap_default_months

    try:
        receivables = ledger.list_items("receivable")
        payables = ledger.list_items("payable")
        analysis = analyze_cash_gap(receivables, payables, as_of, months)

    except (InvalidHorizon, InvalidAgingRecord) as e:
        record_validation_failure(e)
        logging.warning(f"Invalid cash gap input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    cash_gap_level_counter.labels(risk_level=analysis.risk_level).inc()
    log_analysis(
        request_id,
        "cash_gap",
        analysis.risk_level,
        (time.time() - start_time) * 1000,
        receivable_count=len(receivables),
        payable_count=len(payables),
    )

    return CashGapResponse.from_domain(analysis, as_of)
