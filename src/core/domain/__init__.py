"""
Domain models and value objects.

Contains fundamental domain entities like PoolKey, FeeRecord, TradeDirection.
"""

from src.core.domain.fee import FeeRecord, PriceTrend, TradeDirection
from src.core.domain.pool import DYNAMIC_FEE_FLAG, MAX_LP_FEE, PoolKey
from src.core.domain.units import (
    PPM_DENOMINATOR,
    PPM_PER_BPS,
    bps_to_ppm,
    fee_amount,
    ppm_to_fraction,
    validate_fee_ppm,
)

__all__ = [
    # Units module
    "PPM_DENOMINATOR",
    "PPM_PER_BPS",
    "ppm_to_fraction",
    "bps_to_ppm",
    "fee_amount",
    "validate_fee_ppm",
    # Pool model
    "DYNAMIC_FEE_FLAG",
    "MAX_LP_FEE",
    "PoolKey",
    # Fee models
    "FeeRecord",
    "PriceTrend",
    "TradeDirection",
]
