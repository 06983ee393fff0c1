"""GET /api/dscr - Debt service coverage ratio"""

import time
import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query

from finrisk_engine.api.v1.schemas import DSCRResponse
from finrisk_engine.api.dependencies import get_request_id
from finrisk_engine.domain.ratios import evaluate_dscr
from finrisk_engine.domain.exceptions import InvalidScenarioInput
from finrisk_engine.infrastructure.observability.metrics import dscr_status_counter, record_validation_failure
from finrisk_engine.infrastructure.observability.logging import log_analysis

router = APIRouter()


@router.get("/dscr", response_model=DSCRResponse)
def get_dscr(
    operating_cf: Decimal = Query(..., alias="operatingCF", description="Operating cash flow"),
    debt_service: Decimal = Query(..., alias="debtService", description="Total debt service"),
    request_id: str = Depends(get_request_id),
):
    """
    Evaluate DSCR and its status band.

    debtService=0 is valid and returns dscr="Infinity" with status "ok".
    """
    start_time = time.time()

    try:
        result = evaluate_dscr(operating_cf, debt_service)
    except InvalidScenarioInput as e:
        record_validation_failure(e)
        logging.warning(f"Invalid DSCR input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    dscr_status_counter.labels(status=result.status).inc()
    log_analysis(request_id, "dscr", result.status, (time.time() - start_time) * 1000)

    return DSCRResponse(dscr=str(result.dscr), status=result.status)
