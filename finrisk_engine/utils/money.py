"""Decimal helpers for monetary arithmetic"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, localcontext
from typing import Any, Iterable

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a number or numeric string to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.

    Raises:
        ValueError: If the value is None or not numeric
    """
    if value is None:
        raise ValueError("value is required")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"not a number: {value!r}") from e


def quantize_to(amount: Decimal, exponent: Decimal, rounding: str = ROUND_HALF_EVEN) -> Decimal:
    """
    Round a finite amount to the given exponent.

    Precision is widened for the call so very large amounts keep every
    integer digit instead of raising InvalidOperation.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() - exponent.as_tuple().exponent + 1)
        return amount.quantize(exponent, rounding=rounding)


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents using banker's rounding"""
    return quantize_to(amount, CENT)


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum Decimals, returning Decimal("0") for an empty iterable"""
    return sum(amounts, Decimal("0"))
