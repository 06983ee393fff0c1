"""Scenario comparison - best/base/worst scoring with recommendations"""

from decimal import Decimal
from typing import List, Optional, Tuple

from finrisk_engine.domain.exceptions import InvalidScenarioInput
from finrisk_engine.domain.models import (
    RiskScenario,
    ScenarioComparison,
    ScenarioInput,
    ScenarioParameters,
)
from finrisk_engine.domain.risk import (
    build_risk_scenario,
    classify_risk_score,
    validate_scenario_parameters,
)
from finrisk_engine.domain.thresholds import (
    BEST_CASE_MULTIPLIER,
    SCENARIO_FX_EXPOSURE,
    SCENARIO_RATE_SENSITIVITY,
    SCORE_HEALTHY_RECOMMENDATION,
    SCORE_URGENT_RECOMMENDATION,
    WORST_CASE_MULTIPLIER,
)
from finrisk_engine.utils.money import quantize_money, to_decimal

HUNDRED = Decimal("100")

# Tie-break order when two factors contribute equally
FACTOR_RECOMMENDATIONS = (
    ("fx_impact", "Currency exposure is a major driver: review FX hedging for foreign-currency balances"),
    ("rate_impact", "Interest rate changes weigh on the position: consider fixed-rate financing and fixed-income instruments"),
    ("inflation_impact", "Inflation erodes cash value: move idle balances into inflation-protected instruments"),
    ("liquidity_impact", "Liquidity gap drives the risk: build a cash reserve for short-term obligations"),
)

URGENT_RECOMMENDATION = "Risk level is high: diversify the portfolio and cut exposure to the dominant factors"
HEALTHY_RECOMMENDATION = "Position is healthy: the current strategy is sustainable"


def project_scenario_cash(base_cash: Decimal, params: ScenarioParameters) -> Decimal:
    """
    Cash after applying a scenario to a snapshot balance.

    FX moves a tenth of the balance, rates a fifth; inflation and the
    liquidity gap reduce it one-for-one.
    """
    fx_effect = base_cash * (params.fx_delta / HUNDRED) * SCENARIO_FX_EXPOSURE
    rate_effect = base_cash * (params.rate_delta / HUNDRED) * SCENARIO_RATE_SENSITIVITY
    inflation_effect = -base_cash * (params.inflation_delta / HUNDRED)
    liquidity_effect = -base_cash * (params.liquidity_gap / HUNDRED)

    return quantize_money(base_cash + fx_effect + rate_effect + inflation_effect + liquidity_effect)


def derive_scenario_inputs(
    base_cash: Decimal, params: ScenarioParameters
) -> Tuple[ScenarioInput, ScenarioInput, ScenarioInput]:
    """Best halves every delta, worst scales it by 1.5; base uses it as given"""
    validate_scenario_parameters(params)

    legs = []
    for multiplier in (BEST_CASE_MULTIPLIER, Decimal("1"), WORST_CASE_MULTIPLIER):
        leg_params = params if multiplier == 1 else params.scaled(multiplier)
        legs.append(ScenarioInput(parameters=leg_params, cash=project_scenario_cash(base_cash, leg_params)))

    best, base, worst = legs
    return best, base, worst


def generate_recommendations(base: RiskScenario) -> List[str]:
    """
    Ordered advice for the base scenario.

    Factors are listed by contribution, largest first; equal contributions
    keep the FACTOR_RECOMMENDATIONS order so output is stable.
    """
    recommendations: List[str] = []

    if base.score < SCORE_URGENT_RECOMMENDATION:
        recommendations.append(URGENT_RECOMMENDATION)

    contributions = [
        (getattr(base.factors, attr), position, message)
        for position, (attr, message) in enumerate(FACTOR_RECOMMENDATIONS)
    ]
    contributions.sort(key=lambda item: (-item[0], item[1]))
    recommendations.extend(message for impact, _, message in contributions if impact > 0)

    if base.score >= SCORE_HEALTHY_RECOMMENDATION:
        recommendations.append(HEALTHY_RECOMMENDATION)

    return recommendations


def _require_leg(name: str, leg: Optional[ScenarioInput]) -> ScenarioInput:
    if leg is None:
        raise InvalidScenarioInput(f"Missing {name} scenario")
    try:
        cash = to_decimal(leg.cash)
    except ValueError as e:
        raise InvalidScenarioInput(f"Cash for {name} scenario: {e}") from e
    if not cash.is_finite():
        raise InvalidScenarioInput(f"Cash for {name} scenario must be finite")
    validate_scenario_parameters(leg.parameters)
    return ScenarioInput(parameters=leg.parameters, cash=cash)


def compare_scenarios(
    best: Optional[ScenarioInput],
    base: Optional[ScenarioInput],
    worst: Optional[ScenarioInput],
) -> ScenarioComparison:
    """
    Score three scenario legs and assemble the comparison.

    The risk tier comes from the base leg. The engine does not check that
    best.cash >= base.cash >= worst.cash; it scores whatever it is given.

    Raises:
        InvalidScenarioInput: If any leg, cash value or parameter is missing
    """
    legs = {
        "best": _require_leg("best", best),
        "base": _require_leg("base", base),
        "worst": _require_leg("worst", worst),
    }

    scored = {name: build_risk_scenario(leg.parameters, leg.cash) for name, leg in legs.items()}

    return ScenarioComparison(
        best=scored["best"],
        base=scored["base"],
        worst=scored["worst"],
        risk_level=classify_risk_score(scored["base"].score),
        recommendations=generate_recommendations(scored["base"]),
        parameters=legs["base"].parameters,
    )


def analyze_risk(base_cash: Decimal, params: ScenarioParameters) -> ScenarioComparison:
    """Main entry point: derive best/worst legs from one parameter set and compare"""
    best, base, worst = derive_scenario_inputs(base_cash, params)
    return compare_scenarios(best, base, worst)
