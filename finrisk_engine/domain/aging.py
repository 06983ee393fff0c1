"""AR/AP aging classification"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from finrisk_engine.domain.exceptions import InvalidAgingRecord
from finrisk_engine.domain.models import AgingBucketSummary, AgingRecord, AgingSummary, LedgerItem
from finrisk_engine.domain.thresholds import (
    AGING_BUCKET_ORDER,
    AGING_BUCKETS,
    AGING_MAJOR_MATERIALITY_MULTIPLE,
    AGING_OVERFLOW_BUCKET,
    RISK_TIERS,
)
from finrisk_engine.utils.date_utils import days_between
from finrisk_engine.utils.money import sum_amounts

HUNDRED = Decimal("100")
PERCENT = Decimal("0.01")


def calculate_aging_days(due_date: date, as_of: date) -> int:
    """Days past due as of the reference date; negative when not yet due"""
    return days_between(due_date, as_of)


def calculate_aging_bucket(aging_days: int) -> str:
    """Items not yet due (aging_days <= 0) share the 0-30 bucket"""
    for upper_bound, bucket in AGING_BUCKETS:
        if aging_days <= upper_bound:
            return bucket
    return AGING_OVERFLOW_BUCKET


def determine_status(aging_days: int, settled: bool) -> str:
    if settled:
        return "paid"
    return "overdue" if aging_days > 0 else "outstanding"


def determine_risk_level(
    aging_bucket: str,
    current_amount: Decimal,
    aging_days: int,
    settled: bool,
    materiality: Decimal,
) -> str:
    """
    Combine age and size into a risk tier.

    The bucket sets the base tier (0-30 low, 30-60 medium, 60-90 high,
    90+ critical). An overdue balance at or above materiality moves up one
    tier, at or above twice materiality two tiers. Settled items carry no risk.
    """
    if settled:
        return "low"

    tier = AGING_BUCKET_ORDER.index(aging_bucket)

    if aging_days > 0:
        if current_amount >= materiality * AGING_MAJOR_MATERIALITY_MULTIPLE:
            tier += 2
        elif current_amount >= materiality:
            tier += 1

    return RISK_TIERS[min(tier, len(RISK_TIERS) - 1)]


def classify_aging_record(item: LedgerItem, as_of: date, materiality: Decimal) -> AgingRecord:
    """
    Classify a single AR/AP line item. The source item is never modified.

    Raises:
        InvalidAgingRecord: If the item has no due date or amount
    """
    if item.due_date is None:
        raise InvalidAgingRecord(f"Item {item.item_id} has no due date")
    if item.current_amount is None:
        raise InvalidAgingRecord(f"Item {item.item_id} has no amount")

    aging_days = calculate_aging_days(item.due_date, as_of)
    aging_bucket = calculate_aging_bucket(aging_days)

    return AgingRecord(
        item_id=item.item_id,
        counterparty=item.counterparty,
        invoice_date=item.invoice_date,
        due_date=item.due_date,
        current_amount=item.current_amount,
        aging_days=aging_days,
        aging_bucket=aging_bucket,
        status=determine_status(aging_days, item.settled),
        risk_level=determine_risk_level(
            aging_bucket, item.current_amount, aging_days, item.settled, materiality
        ),
    )


def classify_aging_records(
    items: Iterable[LedgerItem], as_of: date, materiality: Decimal
) -> List[AgingRecord]:
    """
    Classify every item, oldest first (ties by item id).

    The whole batch is checked for due dates before any record is
    classified, so a bad item rejects the report without partial work.
    """
    items = list(items)
    for item in items:
        if item.due_date is None:
            raise InvalidAgingRecord(f"Item {item.item_id} has no due date")

    records = [classify_aging_record(item, as_of, materiality) for item in items]
    return sorted(records, key=lambda r: (-r.aging_days, r.item_id))


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return Decimal("0.00")
    return (part / whole * HUNDRED).quantize(PERCENT)


def summarize_aging(records: List[AgingRecord], report_type: str) -> AgingSummary:
    """Bucket totals in fixed bucket order, plus overdue totals and average age"""
    total_amount = sum_amounts(r.current_amount for r in records)

    amounts: Dict[str, Decimal] = {bucket: Decimal("0") for bucket in AGING_BUCKET_ORDER}
    counts: Dict[str, int] = {bucket: 0 for bucket in AGING_BUCKET_ORDER}
    for record in records:
        amounts[record.aging_bucket] += record.current_amount
        counts[record.aging_bucket] += 1

    buckets = [
        AgingBucketSummary(
            bucket=bucket,
            amount=amounts[bucket],
            count=counts[bucket],
            percentage=_percentage(amounts[bucket], total_amount),
        )
        for bucket in AGING_BUCKET_ORDER
    ]

    overdue = [r for r in records if r.status == "overdue"]
    overdue_amount = sum_amounts(r.current_amount for r in overdue)

    average_days = 0
    if records:
        mean = Decimal(sum(r.aging_days for r in records)) / len(records)
        average_days = int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    return AgingSummary(
        report_type=report_type,
        total_amount=total_amount,
        total_count=len(records),
        buckets=buckets,
        average_aging_days=average_days,
        overdue_amount=overdue_amount,
        overdue_count=len(overdue),
        overdue_percentage=_percentage(overdue_amount, total_amount),
    )
