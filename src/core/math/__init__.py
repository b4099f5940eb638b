"""
Core math modules

Целочисленные примитивы расчёта комиссий с гарантией неотрицательности.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    EPOCH_MIN,
    FEE_FLOOR,
    saturating_add,
    saturating_sub,
    validate_epoch,
    validate_indicator,
    validate_non_negative_int,
)

# Fee Derivative
from src.core.math.fee_derivative import (
    DEFAULT_FEE_STEP_PCT,
    direction_from_swap,
    fee_step,
    next_buy_fee,
    next_fee,
    next_sell_fee,
    price_trend,
)

__all__ = [
    # Numerical Safeguards — Constants
    "EPOCH_MIN",
    "FEE_FLOOR",
    # Numerical Safeguards — Saturating arithmetic
    "saturating_add",
    "saturating_sub",
    # Numerical Safeguards — Validation
    "validate_epoch",
    "validate_indicator",
    "validate_non_negative_int",
    # Fee Derivative
    "DEFAULT_FEE_STEP_PCT",
    "direction_from_swap",
    "fee_step",
    "next_buy_fee",
    "next_fee",
    "next_sell_fee",
    "price_trend",
]
