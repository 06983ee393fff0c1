"""Debt service coverage ratio evaluation"""

from decimal import Decimal
from typing import Any

from finrisk_engine.domain.exceptions import InvalidScenarioInput
from finrisk_engine.domain.models import DSCRResult
from finrisk_engine.domain.thresholds import DSCR_OK, DSCR_WARNING
from finrisk_engine.utils.money import to_decimal

INFINITE_COVERAGE = Decimal("Infinity")


def _finite(name: str, value: Any) -> Decimal:
    try:
        number = to_decimal(value)
    except ValueError as e:
        raise InvalidScenarioInput(f"{name}: {e}") from e
    if not number.is_finite():
        raise InvalidScenarioInput(f"{name} must be finite, got {value!r}")
    return number


def calculate_dscr(operating_cf: Any, debt_service: Any) -> Decimal:
    """
    Operating cash flow divided by debt service.

    No debt service means coverage is unbounded: returns Decimal("Infinity")
    for any operating cash flow instead of raising.
    """
    operating_cf = _finite("operating_cf", operating_cf)
    debt_service = _finite("debt_service", debt_service)

    if debt_service == 0:
        return INFINITE_COVERAGE
    return operating_cf / debt_service


def map_dscr_status(dscr: Decimal) -> str:
    """
    Map a DSCR to its status band.

    - dscr >= 1.5:        ok
    - 1.0 <= dscr < 1.5:  warning
    - dscr < 1.0:         critical
    """
    if dscr >= DSCR_OK:
        return "ok"
    elif dscr >= DSCR_WARNING:
        return "warning"
    else:
        return "critical"


def evaluate_dscr(operating_cf: Any, debt_service: Any) -> DSCRResult:
    """Compute the ratio and its status in one call"""
    dscr = calculate_dscr(operating_cf, debt_service)
    return DSCRResult(dscr=dscr, status=map_dscr_status(dscr))
