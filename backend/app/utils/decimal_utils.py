"""
Decimal helpers for BizLedger money values.

All money columns in the database use NUMERIC(18, 2). Derived ratios (ROI)
are returned with a fixed number of decimal places so that repeated reads of
the same totals serialize identically.

Usage:
    from backend.app.utils.decimal_utils import to_money, ratio_percent

    to_money(Decimal("10.5"))                          # Decimal("10.50")
    ratio_percent(Decimal("50"), Decimal("200"))       # Decimal("25.0000")
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

ZERO = Decimal("0")
MONEY_SCALE = 2
PERCENT_SCALE = 4


def _quantizer(scale: int) -> Decimal:
    # Example: scale=2 -> quantizer=0.01
    return Decimal(10) ** -scale


def to_money(value: Any) -> Decimal:
    """
    Coerce a number to a Decimal with money precision.

    Floats are converted through str() so that 0.1 stays 0.1.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"Amount must be a number, got {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number, got {value!r}")
    try:
        return amount.quantize(_quantizer(MONEY_SCALE), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Amount out of range: {value!r}") from e


def ratio_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    numerator / denominator * 100, or 0 when the denominator is not positive.
    """
    if denominator is None or denominator <= ZERO:
        return ZERO
    value = Decimal(numerator) / Decimal(denominator) * 100
    return value.quantize(_quantizer(PERCENT_SCALE), rounding=ROUND_HALF_UP)
