"""GET /api/aging/{report_type} - AR/AP aging classification"""

import logging
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from finrisk_engine.api.v1.schemas import AgingRecordSchema, AgingSummaryResponse, ReportType
from finrisk_engine.api.dependencies import get_ledger_repository, get_reference_date, get_request_id
from finrisk_engine.config import settings
from finrisk_engine.domain.aging import classify_aging_records, summarize_aging
from finrisk_engine.domain.exceptions import InvalidAgingRecord
from finrisk_engine.domain.models import AgingRecord
from finrisk_engine.infrastructure.database.repositories import LedgerRepository
from finrisk_engine.infrastructure.observability.metrics import record_aging, record_validation_failure

router = APIRouter()


def _classify(
    report_type: ReportType, as_of: date, ledger: LedgerRepository, request_id: str
) -> List[AgingRecord]:
    items = ledger.list_items(report_type.ledger_kind, include_settled=True)
    try:
        return classify_aging_records(items, as_of, settings.aging_materiality_threshold)
    except InvalidAgingRecord as e:
        record_validation_failure(e)
        logging.warning(f"Invalid aging record: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/aging/{report_type}", response_model=List[AgingRecordSchema])
def get_aging_records(
    report_type: ReportType,
    request_id: str = Depends(get_request_id),
    as_of: date = Depends(get_reference_date),
    ledger: LedgerRepository = Depends(get_ledger_repository),
):
    """
    Classify every AR or AP item by age, status and risk.

    Returns:
        Records ordered oldest first
    """
    records = _classify(report_type, as_of, ledger, request_id)
    record_aging(report_type.value, (r.risk_level for r in records))
    return [AgingRecordSchema.from_domain(r) for r in records]


@router.get("/aging/{report_type}/summary", response_model=AgingSummaryResponse)
def get_aging_summary(
    report_type: ReportType,
    request_id: str = Depends(get_request_id),
    as_of: date = Depends(get_reference_date),
    ledger: LedgerRepository = Depends(get_ledger_repository),
):
    """Bucket totals, overdue share and average age for AR or AP"""
    records = _classify(report_type, as_of, ledger, request_id)
    return AgingSummaryResponse.from_domain(summarize_aging(records, report_type.value))
