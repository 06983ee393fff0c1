"""Cash runway - how long cash lasts, combined dashboard tier and cash-flow forecast"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Sequence

from finrisk_engine.domain.exceptions import InvalidHorizon, InvalidScenarioInput
from finrisk_engine.domain.models import (
    CashGapAnalysis,
    DashboardOverview,
    DashboardSummary,
    ForecastMonth,
    RunwayAnalysis,
    RunwayMonth,
    TimelinePeriod,
)
from finrisk_engine.domain.thresholds import (
    DAYS_PER_MONTH,
    DEFAULT_RUNWAY_MONTHS,
    FORECAST_HIGH_CONFIDENCE_MONTHS,
    FORECAST_MEDIUM_CONFIDENCE_MONTHS,
    RUNWAY_CRITICAL_MONTHS,
    RUNWAY_WARNING_MONTHS,
)
from finrisk_engine.utils.date_utils import add_months, generate_month_labels
from finrisk_engine.utils.money import CENT, quantize_to, to_decimal

INFINITY = Decimal("Infinity")
ZERO = Decimal("0")

RUNWAY_RECOMMENDATIONS = {
    "critical": [
        "Cash need is urgent: raise revenue or cut expenses now",
        "Evaluate short-term credit lines",
        "Apply strategies to accelerate receivables",
    ],
    "warning": [
        "Monitor the cash position closely",
        "Look for revenue growth opportunities",
        "Review non-essential expenses",
    ],
    "healthy": [
        "Cash position is healthy",
        "Surplus cash can be considered for investment",
    ],
}


def _require_finite(name: str, value: Any) -> Decimal:
    try:
        number = to_decimal(value)
    except ValueError as e:
        raise InvalidScenarioInput(f"{name}: {e}") from e
    if not number.is_finite():
        raise InvalidScenarioInput(f"{name} must be finite, got {value!r}")
    return number


def _require_expenses(value: Any) -> Decimal:
    expenses = _require_finite("monthly_expenses", value)
    if expenses < 0:
        raise InvalidScenarioInput(f"monthly_expenses must not be negative, got {value!r}")
    return expenses


def calculate_runway_months(current_cash: Decimal, monthly_expenses: Decimal) -> Decimal:
    """
    Months of cash at the current burn, unrounded.

    - cash <= 0:     0
    - no expenses:   Infinity
    - otherwise:     cash / expenses
    """
    if current_cash <= 0:
        return ZERO
    if monthly_expenses == 0:
        return INFINITY
    return current_cash / monthly_expenses


def classify_runway(current_cash: Decimal, runway_months: Decimal) -> str:
    """
    Map a runway to its status.

    - cash <= 0 or runway < 3 months:  critical
    - runway < 6 months:               warning
    - otherwise:                       healthy
    """
    if current_cash <= 0 or runway_months < RUNWAY_CRITICAL_MONTHS:
        return "critical"
    elif runway_months < RUNWAY_WARNING_MONTHS:
        return "warning"
    else:
        return "healthy"


def build_runway_breakdown(
    current_cash: Decimal, monthly_expenses: Decimal, as_of: date, months: int
) -> List[RunwayMonth]:
    """Month-by-month burn starting the month after as_of; projected cash never shown below zero"""
    labels = generate_month_labels(add_months(as_of, 1), months)

    breakdown: List[RunwayMonth] = []
    running_cash = current_cash
    for label in labels:
        running_cash -= monthly_expenses
        breakdown.append(
            RunwayMonth(
                period=label,
                projected_cash=max(ZERO, running_cash),
                expenses=monthly_expenses,
                net_cash=-monthly_expenses,
            )
        )
    return breakdown


def analyze_runway(
    current_cash: Any,
    monthly_expenses: Any,
    as_of: date,
    months: int = DEFAULT_RUNWAY_MONTHS,
) -> RunwayAnalysis:
    """
    Main entry point: runway, status and monthly burn for a cash balance.

    The status is taken from the unrounded runway; the reported months are
    rounded to hundredths and the days to whole days.

    Args:
        current_cash: Liquid cash today
        monthly_expenses: Average monthly outflow supplied by the caller
        as_of: Reference "now" (never read from the clock here)
        months: Length of the monthly breakdown

    Raises:
        InvalidHorizon: If months is not a positive integer
        InvalidScenarioInput: If cash or expenses are missing or non-finite,
            or expenses are negative
    """
    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise InvalidHorizon(f"Runway months must be a positive integer, got {months!r}")

    cash = _require_finite("current_cash", current_cash)
    expenses = _require_expenses(monthly_expenses)

    ratio = calculate_runway_months(cash, expenses)
    status = classify_runway(cash, ratio)

    if ratio.is_finite():
        runway_months = quantize_to(ratio, CENT, ROUND_HALF_UP)
        runway_days = quantize_to(ratio * DAYS_PER_MONTH, Decimal("1"), ROUND_HALF_UP)
    else:
        runway_months = runway_days = ratio

    return RunwayAnalysis(
        current_cash=cash,
        monthly_expenses=expenses,
        runway_months=runway_months,
        runway_days=runway_days,
        status=status,
        recommendations=list(RUNWAY_RECOMMENDATIONS[status]),
        monthly_breakdown=build_runway_breakdown(cash, expenses, as_of, months),
    )


def combine_overall_risk(runway_status: str, cash_gap_level: str) -> str:
    """
    Single dashboard tier from the runway status and the cash-gap tier.

    - either side critical:                  critical
    - runway warning or cash gap high:       high
    - cash gap medium:                       medium
    - otherwise:                             low
    """
    if runway_status == "critical" or cash_gap_level == "critical":
        return "critical"
    if runway_status == "warning" or cash_gap_level == "high":
        return "high"
    if cash_gap_level == "medium":
        return "medium"
    return "low"


def build_dashboard_overview(runway: RunwayAnalysis, cash_gap: CashGapAnalysis) -> DashboardOverview:
    """Net position is cash plus receivables minus payables"""
    summary = DashboardSummary(
        total_cash=runway.current_cash,
        total_ar=cash_gap.total_ar,
        total_ap=cash_gap.total_ap,
        net_position=runway.current_cash + cash_gap.total_ar - cash_gap.total_ap,
        runway_status=runway.status,
        cash_gap_status=cash_gap.risk_level,
    )
    return DashboardOverview(
        runway=runway,
        cash_gap=cash_gap,
        overall_risk=combine_overall_risk(runway.status, cash_gap.risk_level),
        summary=summary,
    )


def forecast_confidence(index: int) -> str:
    if index < FORECAST_HIGH_CONFIDENCE_MONTHS:
        return "high"
    elif index < FORECAST_MEDIUM_CONFIDENCE_MONTHS:
        return "medium"
    return "low"


def forecast_cash_flow(
    current_cash: Any, monthly_expenses: Any, timeline: Sequence[TimelinePeriod]
) -> List[ForecastMonth]:
    """
    Opening and closing cash for each period of a cash-gap timeline.

    Inflows are the period's receivables; outflows are the monthly expenses
    plus the period's payables. Each closing balance is the next period's
    opening balance and may go negative.

    Raises:
        InvalidScenarioInput: If cash or expenses are missing or non-finite,
            or expenses are negative
    """
    opening_cash = _require_finite("current_cash", current_cash)
    expenses = _require_expenses(monthly_expenses)

    forecast: List[ForecastMonth] = []
    for index, period in enumerate(timeline):
        outflows = expenses + period.ap_amount
        net_cash_flow = period.ar_amount - outflows
        closing_cash = opening_cash + net_cash_flow
        forecast.append(
            ForecastMonth(
                period=period.period,
                opening_cash=opening_cash,
                projected_inflows=period.ar_amount,
                projected_outflows=outflows,
                net_cash_flow=net_cash_flow,
                closing_cash=closing_cash,
                confidence=forecast_confidence(index),
            )
        )
        opening_cash = closing_cash

    return forecast
