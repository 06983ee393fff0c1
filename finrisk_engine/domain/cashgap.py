"""Cash gap analysis - reconciles receivables against payables"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Sequence

from finrisk_engine.domain.exceptions import InvalidAgingRecord, InvalidHorizon
from finrisk_engine.domain.models import CashGapAnalysis, LedgerItem, TimelinePeriod
from finrisk_engine.domain.thresholds import (
    CASH_GAP_FAR_WINDOW_DAYS,
    CASH_GAP_HIGH_SHORTFALL,
    CASH_GAP_MEDIUM_SHORTFALL,
    CASH_GAP_NEAR_WINDOW_DAYS,
    RISK_TIERS,
)
from finrisk_engine.utils.date_utils import generate_month_labels, month_index
from finrisk_engine.utils.money import sum_amounts

DEFAULT_TIMELINE_MONTHS = 6


def _validate_items(items: Sequence[LedgerItem]) -> None:
    for item in items:
        if item.due_date is None:
            raise InvalidAgingRecord(f"Item {item.item_id} has no due date")
        if item.current_amount is None:
            raise InvalidAgingRecord(f"Item {item.item_id} has no amount")


def due_within(items: Iterable[LedgerItem], as_of: date, days: int) -> Decimal:
    """Total of items due on or before as_of + days; overdue items count as due now"""
    cutoff = as_of + timedelta(days=days)
    return sum_amounts(item.current_amount for item in items if item.due_date <= cutoff)


def classify_net_gap(net_gap: Decimal, total_ap: Decimal) -> str:
    """
    Tier a net gap by the shortfall's share of total payables.

    - no shortfall:          low
    - shortfall < 10% of AP: medium
    - shortfall < 25% of AP: high
    - otherwise:             critical
    """
    if net_gap >= 0:
        return "low"
    if total_ap <= 0:
        return "critical"

    shortfall_ratio = -net_gap / total_ap
    if shortfall_ratio < CASH_GAP_MEDIUM_SHORTFALL:
        return "medium"
    elif shortfall_ratio < CASH_GAP_HIGH_SHORTFALL:
        return "high"
    else:
        return "critical"


def worse_tier(*tiers: str) -> str:
    return max(tiers, key=RISK_TIERS.index)


def build_timeline(
    receivables: Sequence[LedgerItem],
    payables: Sequence[LedgerItem],
    as_of: date,
    months: int,
) -> List[TimelinePeriod]:
    """
    Bucket items by due month into `months` periods starting at as_of's month.

    Overdue items land in the first period. Items due after the last period
    are left out of the timeline (they still count in the totals).
    """
    labels = generate_month_labels(as_of, months)
    ar_by_period = [Decimal("0")] * months
    ap_by_period = [Decimal("0")] * months

    for items, buckets in ((receivables, ar_by_period), (payables, ap_by_period)):
        for item in items:
            index = max(0, month_index(as_of, item.due_date))
            if index < months:
                buckets[index] += item.current_amount

    timeline: List[TimelinePeriod] = []
    cumulative_cash = Decimal("0")
    for label, ar_amount, ap_amount in zip(labels, ar_by_period, ap_by_period):
        net_cash_flow = ar_amount - ap_amount
        cumulative_cash += net_cash_flow
        timeline.append(
            TimelinePeriod(
                period=label,
                ar_amount=ar_amount,
                ap_amount=ap_amount,
                net_cash_flow=net_cash_flow,
                cumulative_cash=cumulative_cash,
            )
        )

    return timeline


def generate_cash_gap_recommendations(
    cash_gap: Decimal, risk_level: str, timeline: List[TimelinePeriod]
) -> List[str]:
    """Advice keyed off the cash-negative periods, in timeline order"""
    recommendations: List[str] = []

    if cash_gap < 0:
        recommendations.append(
            "Payables exceed receivables overall: speed up collections and review payment terms"
        )

    for period in timeline:
        if period.net_cash_flow < 0:
            recommendations.append(
                f"Net outflow of {-period.net_cash_flow} expected in {period.period}: "
                "accelerate receivables or defer payables due that month"
            )

    first_negative = next((p for p in timeline if p.cumulative_cash < 0), None)
    if first_negative is not None:
        recommendations.append(
            f"Cumulative cash turns negative in {first_negative.period}: "
            "arrange short-term financing before then"
        )

    if risk_level in ("high", "critical"):
        recommendations.append("Make cash-flow management a priority")

    if not recommendations:
        recommendations.append("Receivables cover payables across the forecast horizon")

    return recommendations


def analyze_cash_gap(
    receivables: Iterable[LedgerItem],
    payables: Iterable[LedgerItem],
    as_of: date,
    months: int = DEFAULT_TIMELINE_MONTHS,
) -> CashGapAnalysis:
    """
    Main entry point: reconcile outstanding AR and AP as of a reference date.

    Args:
        receivables: Outstanding AR items
        payables: Outstanding AP items
        as_of: Reference "now" (never read from the clock here)
        months: Timeline length in months

    Raises:
        InvalidHorizon: If months is not a positive integer
        InvalidAgingRecord: If any item lacks a due date or amount
    """
    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise InvalidHorizon(f"Timeline months must be a positive integer, got {months!r}")

    receivables = list(receivables)
    payables = list(payables)
    _validate_items(receivables)
    _validate_items(payables)

    total_ar = sum_amounts(item.current_amount for item in receivables)
    total_ap = sum_amounts(item.current_amount for item in payables)
    cash_gap = total_ar - total_ap

    ar_due_in_30_days = due_within(receivables, as_of, CASH_GAP_NEAR_WINDOW_DAYS)
    ap_due_in_30_days = due_within(payables, as_of, CASH_GAP_NEAR_WINDOW_DAYS)
    net_gap_30_days = ar_due_in_30_days - ap_due_in_30_days

    ar_due_in_60_days = due_within(receivables, as_of, CASH_GAP_FAR_WINDOW_DAYS)
    ap_due_in_60_days = due_within(payables, as_of, CASH_GAP_FAR_WINDOW_DAYS)
    net_gap_60_days = ar_due_in_60_days - ap_due_in_60_days

    risk_level = worse_tier(
        classify_net_gap(net_gap_30_days, total_ap),
        classify_net_gap(net_gap_60_days, total_ap),
    )

    timeline = build_timeline(receivables, payables, as_of, months)

    return CashGapAnalysis(
        total_ar=total_ar,
        total_ap=total_ap,
        cash_gap=cash_gap,
        ar_due_in_30_days=ar_due_in_30_days,
        ap_due_in_30_days=ap_due_in_30_days,
        net_gap_30_days=net_gap_30_days,
        ar_due_in_60_days=ar_due_in_60_days,
        ap_due_in_60_days=ap_due_in_60_days,
        net_gap_60_days=net_gap_60_days,
        risk_level=risk_level,
        recommendations=generate_cash_gap_recommendations(cash_gap, risk_level, timeline),
        timeline=timeline,
    )
