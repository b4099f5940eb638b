"""Hooks — точки интеграции пула: setup validation, fee query, oracle, rebalancing."""

from .pool_validator import (
    InvalidBaseFeeError,
    PoolNotDynamicFeeError,
    PoolNotInitializedError,
    PoolSetupValidator,
)
from .rebalancer import (
    LiquidityRebalancer,
    LiquidityRemoved,
    RebalanceResult,
    RebalancerConfig,
    UnsupportedIntegrationError,
    YieldIntegration,
    YieldIntegrationKind,
)
from .dynamic_fee_hook import DynamicFeeHook, SwapFeeResult

__all__ = [
    "PoolSetupValidator",
    "PoolNotDynamicFeeError",
    "InvalidBaseFeeError",
    "PoolNotInitializedError",
    "YieldIntegrationKind",
    "YieldIntegration",
    "LiquidityRemoved",
    "RebalancerConfig",
    "RebalanceResult",
    "LiquidityRebalancer",
    "UnsupportedIntegrationError",
    "DynamicFeeHook",
    "SwapFeeResult",
]
