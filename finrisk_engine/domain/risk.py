"""Risk factor model - weighted impact scoring of scenario deltas"""

from decimal import Decimal
from typing import Any, Dict, Mapping

from finrisk_engine.domain.exceptions import InvalidScenarioInput
from finrisk_engine.domain.models import RiskFactors, RiskLevel, RiskScenario, ScenarioParameters
from finrisk_engine.domain.thresholds import (
    FX_WEIGHT,
    INFLATION_WEIGHT,
    LIQUIDITY_WEIGHT,
    MAX_SCORE,
    MIN_SCORE,
    PARAMETER_LIMITS,
    RATE_WEIGHT,
    SCORE_HIGH_RISK,
    SCORE_LOW_RISK,
    SCORE_MEDIUM_RISK,
)
from finrisk_engine.utils.money import to_decimal

PARAMETER_FIELDS = ("fx_delta", "rate_delta", "inflation_delta", "liquidity_gap")

RISK_LEVEL_DESCRIPTIONS = {
    "low": "Risk level is low, the position is secure",
    "medium": "Risk level is moderate, monitor closely",
    "high": "Risk level is high, mitigating action is needed",
    "critical": "Risk level is critical, immediate intervention required",
}


def parse_scenario_parameters(values: Mapping[str, Any]) -> ScenarioParameters:
    """
    Build ScenarioParameters from a loose mapping of snake_case fields.

    Raises:
        InvalidScenarioInput: If a field is missing, not numeric or not finite
    """
    parsed: Dict[str, Decimal] = {}
    for name in PARAMETER_FIELDS:
        if values.get(name) is None:
            raise InvalidScenarioInput(f"Missing scenario parameter: {name}")
        try:
            parsed[name] = to_decimal(values[name])
        except ValueError as e:
            raise InvalidScenarioInput(f"{name}: {e}") from e

    params = ScenarioParameters(**parsed)
    validate_scenario_parameters(params)
    return params


def validate_scenario_parameters(params: ScenarioParameters) -> None:
    """
    Reject parameter sets the factor model cannot score.

    Negative liquidity_gap is valid and flows through the formula unchanged.
    """
    if params is None:
        raise InvalidScenarioInput("Scenario parameters are required")

    for name in PARAMETER_FIELDS:
        value = getattr(params, name, None)
        if value is None:
            raise InvalidScenarioInput(f"Missing scenario parameter: {name}")
        if not isinstance(value, Decimal):
            raise InvalidScenarioInput(f"{name} must be a Decimal, got {type(value).__name__}")
        if not value.is_finite():
            raise InvalidScenarioInput(f"{name} must be finite, got {value}")


def calculate_risk_factors(params: ScenarioParameters) -> RiskFactors:
    """
    Weighted impact per delta.

    FX, rate and inflation deltas hurt in either direction, so their magnitude
    is used. Liquidity gap keeps its sign: a negative gap (surplus) lowers the
    total impact.
    """
    return RiskFactors(
        fx_impact=abs(params.fx_delta) * FX_WEIGHT,
        rate_impact=abs(params.rate_delta) * RATE_WEIGHT,
        inflation_impact=abs(params.inflation_delta) * INFLATION_WEIGHT,
        liquidity_impact=params.liquidity_gap * LIQUIDITY_WEIGHT,
    )


def calculate_risk_score(factors: RiskFactors) -> Decimal:
    """Score from 0 (highest risk) to 100 (no impact)"""
    return max(MIN_SCORE, min(MAX_SCORE, MAX_SCORE - factors.total_impact))


def build_risk_scenario(params: ScenarioParameters, cash: Decimal) -> RiskScenario:
    """Score one parameter set; cash is carried through untouched"""
    validate_scenario_parameters(params)
    factors = calculate_risk_factors(params)
    return RiskScenario(cash=cash, score=calculate_risk_score(factors), factors=factors)


def classify_risk_score(score: Decimal) -> RiskLevel:
    """
    Map a score to its risk tier.

    - score >= 80:  low
    - score >= 60:  medium
    - score >= 40:  high
    - below 40:     critical
    """
    if score >= SCORE_LOW_RISK:
        level = "low"
    elif score >= SCORE_MEDIUM_RISK:
        level = "medium"
    elif score >= SCORE_HIGH_RISK:
        level = "high"
    else:
        level = "critical"
    return RiskLevel(level=level, description=RISK_LEVEL_DESCRIPTIONS[level])


def check_parameter_limits(params: ScenarioParameters) -> Dict[str, Dict[str, Any]]:
    """
    Report whether each parameter sits inside its advisory slider range.

    Advisory only: scoring accepts any finite value.
    """
    validate_scenario_parameters(params)
    report: Dict[str, Dict[str, Any]] = {}
    for name in PARAMETER_FIELDS:
        value = getattr(params, name)
        low, high = PARAMETER_LIMITS[name]
        within = low <= value <= high
        report[name] = {
            "value": value,
            "min": low,
            "max": high,
            "valid": within,
            "message": "Valid" if within else f"{name} should be between {low}% and {high}%",
        }
    return report
