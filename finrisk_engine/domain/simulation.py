"""Forward simulation - month-by-month projection of cash, debt and net worth"""

from decimal import Decimal
from typing import List, Optional

from finrisk_engine.domain.exceptions import InvalidHorizon, InvalidScenarioInput
from finrisk_engine.domain.models import (
    FinancialState,
    MonthProjection,
    ScenarioParameters,
    SimulationResult,
    SimulationSummary,
)
from finrisk_engine.domain.risk import validate_scenario_parameters
from finrisk_engine.domain.thresholds import (
    DEFAULT_FOREIGN_CURRENCY_SHARE,
    MONTHS_PER_YEAR,
    SIMULATION_HORIZONS,
)
from finrisk_engine.utils.money import quantize_money, to_decimal

HUNDRED = Decimal("100")


def validate_horizon(horizon_months: int) -> None:
    if isinstance(horizon_months, bool) or horizon_months not in SIMULATION_HORIZONS:
        raise InvalidHorizon(
            f"horizon_months must be one of {SIMULATION_HORIZONS}, got {horizon_months!r}"
        )


def monthly_rate(annual_percent: Decimal) -> Decimal:
    """Annual percentage delta as a monthly fraction"""
    return annual_percent / HUNDRED / MONTHS_PER_YEAR


def project_month(
    month: int,
    previous: MonthProjection,
    params: ScenarioParameters,
    monthly_net_cash_flow: Decimal,
    foreign_currency_share: Decimal,
) -> MonthProjection:
    """
    Apply one month of the scenario to the previous month's state.

    - debt accrues interest at rate_delta / 12
    - cash loses purchasing power at inflation_delta / 12
    - the foreign-currency share of cash is translated at fx_delta / 12
    - non-cash assets are unaffected, so net worth moves by the cash and debt deltas
    """
    interest = previous.debt * monthly_rate(params.rate_delta)
    erosion = previous.cash * monthly_rate(params.inflation_delta)
    fx_effect = previous.cash * foreign_currency_share * monthly_rate(params.fx_delta)

    cash = quantize_money(previous.cash - erosion + fx_effect + monthly_net_cash_flow)
    debt = quantize_money(previous.debt + interest)
    net_worth = previous.net_worth + (cash - previous.cash) - (debt - previous.debt)

    return MonthProjection(month=month, cash=cash, debt=debt, net_worth=net_worth)


def find_cash_deficit_month(projections: List[MonthProjection]) -> Optional[int]:
    """First month whose projected cash is negative"""
    for projection in projections:
        if projection.cash < 0:
            return projection.month
    return None


def _signed(amount: Decimal) -> str:
    if amount.is_zero():
        amount = abs(amount)
    return format(amount, "+,.2f")


def describe_simulation(horizon_months: int, summary: SimulationSummary) -> str:
    """
    Plain-text digest of a run, one statement per line.

    Example:
        3-month simulation results:
        Cash change: +0.00
        Debt change: +363.61
        Net worth change: -363.61
        Cash deficit risk: low
    """
    lines = [
        f"{horizon_months}-month simulation results:",
        f"Cash change: {_signed(summary.total_cash_change)}",
        f"Debt change: {_signed(summary.total_debt_change)}",
        f"Net worth change: {_signed(summary.total_net_worth_change)}",
    ]
    if summary.cash_deficit_month is not None:
        lines.append(f"Cash deficit possible in month {summary.cash_deficit_month}")
    else:
        lines.append("Cash deficit risk: low")
    return "\n".join(lines)


def _coerce(name: str, value) -> Decimal:
    try:
        number = to_decimal(value)
    except ValueError as e:
        raise InvalidScenarioInput(f"{name}: {e}") from e
    if not number.is_finite():
        raise InvalidScenarioInput(f"{name} must be finite, got {value!r}")
    return number


def run_simulation(
    current_state: FinancialState,
    params: ScenarioParameters,
    horizon_months: int,
    monthly_net_cash_flow: Decimal = Decimal("0"),
    foreign_currency_share: Decimal = DEFAULT_FOREIGN_CURRENCY_SHARE,
) -> SimulationResult:
    """
    Main entry point: project the current state forward under a scenario.

    Args:
        current_state: Cash, debt and net worth today
        params: Scenario deltas (liquidity_gap is not used by the projection)
        horizon_months: 3, 6 or 12
        monthly_net_cash_flow: Operating inflow minus outflow added each month
        foreign_currency_share: Fraction of cash held in foreign currency

    Raises:
        InvalidHorizon: If horizon_months is not 3, 6 or 12
        InvalidScenarioInput: If a parameter or state value is missing or non-finite
    """
    validate_horizon(horizon_months)
    validate_scenario_parameters(params)
    if current_state is None:
        raise InvalidScenarioInput("Current financial state is required")

    start = MonthProjection(
        month=0,
        cash=_coerce("cash", current_state.cash),
        debt=_coerce("debt", current_state.debt),
        net_worth=_coerce("net_worth", current_state.net_worth),
    )
    monthly_net_cash_flow = _coerce("monthly_net_cash_flow", monthly_net_cash_flow)
    foreign_currency_share = _coerce("foreign_currency_share", foreign_currency_share)

    projections: List[MonthProjection] = []
    previous = start
    for month in range(1, horizon_months + 1):
        previous = project_month(month, previous, params, monthly_net_cash_flow, foreign_currency_share)
        projections.append(previous)

    final = projections[-1]
    summary = SimulationSummary(
        cash_deficit_month=find_cash_deficit_month(projections),
        total_cash_change=final.cash - start.cash,
        total_debt_change=final.debt - start.debt,
        total_net_worth_change=final.net_worth - start.net_worth,
    )

    return SimulationResult(
        parameters=params,
        horizon_months=horizon_months,
        current_state=FinancialState(cash=start.cash, debt=start.debt, net_worth=start.net_worth),
        projections=projections,
        summary=summary,
        narrative=describe_simulation(horizon_months, summary),
    )
