"""Unit tests for DSCR evaluation"""

import pytest
from decimal import Decimal
from finrisk_engine.domain.ratios import calculate_dscr, evaluate_dscr, map_dscr_status
from finrisk_engine.domain.exceptions import InvalidScenarioInput


def test_calculate_dscr_examples():
    """Documented examples map to all three bands"""
    assert calculate_dscr(200, 100) == 2
    assert map_dscr_status(calculate_dscr(200, 100)) == "ok"

    assert calculate_dscr(120, 120) == 1
    assert map_dscr_status(calculate_dscr(120, 120)) == "warning"

    assert calculate_dscr(80, 100) == Decimal("0.8")
    assert map_dscr_status(calculate_dscr(80, 100)) == "critical"


@pytest.mark.parametrize("operating_cf", [-5000, 0, 1, Decimal("123456.78")])
def test_zero_debt_service_is_infinite(operating_cf):
    """No debt service means unbounded coverage, never an error"""
    dscr = calculate_dscr(operating_cf, 0)
    assert dscr == Decimal("Infinity")
    assert map_dscr_status(dscr) == "ok"


@pytest.mark.parametrize(
    "dscr, status",
    [
        (Decimal("1.5"), "ok"),
        (Decimal("1.4999"), "warning"),
        (Decimal("1.0"), "warning"),
        (Decimal("0.9999"), "critical"),
        (Decimal("-2"), "critical"),
        (Decimal("Infinity"), "ok"),
        (float("inf"), "ok"),
    ],
)
def test_map_dscr_status_boundaries(dscr, status):
    """Lower edge of each band belongs to the higher band"""
    assert map_dscr_status(dscr) == status


def test_float_inputs_are_exact():
    """Floats are read through their decimal repr, not their binary value"""
    assert calculate_dscr(0.3, 0.1) == 3


def test_evaluate_dscr_returns_ratio_and_status():
    result = evaluate_dscr(Decimal("150"), Decimal("100"))
    assert result.dscr == Decimal("1.5")
    assert result.status == "ok"


@pytest.mark.parametrize("bad", [None, "abc", float("nan"), float("inf")])
def test_non_finite_operands_rejected(bad):
    with pytest.raises(InvalidScenarioInput):
        calculate_dscr(bad, 100)
    with pytest.raises(InvalidScenarioInput):
        calculate_dscr(100, bad)


@pytest.mark.parametrize("operating_cf, debt_service", [(150, 100), (80, 100), (-50, 0)])
def test_evaluate_dscr_is_deterministic(operating_cf, debt_service):
    assert evaluate_dscr(operating_cf, debt_service) == evaluate_dscr(operating_cf, debt_service)
