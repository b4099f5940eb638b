"""DynamicFeeHook — точки вызова пула вокруг DynamicFeeEngine.

Жизненный цикл:
- before_initialize: setup validation пула (динамическая комиссия обязательна)
- before_swap: запрос комиссии для сделки (fee query caller)
- after_swap: запись price indicator после settlement (price oracle hook)
- after_remove_liquidity: пересылка выведенной ликвидности (если настроен rebalancer)
"""

from dataclasses import dataclass
from typing import Optional, Set

from loguru import logger

from src.core.domain.fee import TradeDirection
from src.core.domain.pool import PoolKey
from src.core.domain.units import fee_amount
from src.core.math.fee_derivative import direction_from_swap
from src.engine.dynamic_fee_engine import DynamicFeeEngine, FeeQuote
from src.hooks.pool_validator import PoolNotInitializedError, PoolSetupValidator
from src.hooks.rebalancer import LiquidityRebalancer, LiquidityRemoved, RebalanceResult


@dataclass(frozen=True)
class SwapFeeResult:
    """Комиссия для сделки перед её исполнением."""

    pool_id: str
    epoch: int
    direction: TradeDirection
    fee: int
    fee_amount: Optional[int]

    quote: FeeQuote


class DynamicFeeHook:
    """Facade пула: validator + engine + rebalancer."""

    def __init__(
        self,
        engine: Optional[DynamicFeeEngine] = None,
        validator: Optional[PoolSetupValidator] = None,
        rebalancer: Optional[LiquidityRebalancer] = None,
    ):
        self.engine = engine or DynamicFeeEngine()
        self.validator = validator or PoolSetupValidator()
        self.rebalancer = rebalancer
        self._initialized: Set[str] = set()

    def before_initialize(self, pool: PoolKey) -> None:
        """Setup validation; пул допускается к запросам комиссии только после неё."""
        self.validator.validate(pool)
        self._initialized.add(pool.pool_id)
        logger.info("Pool {} initialized with base fee {}", pool.pool_id, pool.base_fee)

    def before_swap(
        self,
        pool: PoolKey,
        epoch: int,
        zero_for_one: bool,
        amount_in: Optional[int] = None,
    ) -> SwapFeeResult:
        """
        Комиссия для сделки.

        Args:
            pool: пул
            epoch: текущая epoch
            zero_for_one: True если трейдер отдаёт currency0 (SELL)
            amount_in: объём входного актива, если нужен размер комиссии

        Returns:
            SwapFeeResult с комиссией (ppm) и, при amount_in, её размером
        """
        self._require_initialized(pool)
        direction = direction_from_swap(zero_for_one)
        quote = self.engine.get_fee_quote(pool, epoch, direction)

        return SwapFeeResult(
            pool_id=pool.pool_id,
            epoch=epoch,
            direction=direction,
            fee=quote.fee,
            fee_amount=fee_amount(amount_in, quote.fee) if amount_in is not None else None,
            quote=quote,
        )

    def after_swap(self, pool: PoolKey, epoch: int, tick: int) -> None:
        """Запись текущего tick пула как price indicator epoch."""
        self._require_initialized(pool)
        self.engine.record_indicator(pool.pool_id, epoch, tick)

    def after_remove_liquidity(
        self, pool: PoolKey, epoch: int, amount0: int, amount1: int
    ) -> Optional[RebalanceResult]:
        """Пересылка выведенной ликвидности; None если rebalancer не настроен."""
        self._require_initialized(pool)
        if self.rebalancer is None:
            return None

        event = LiquidityRemoved(
            pool_id=pool.pool_id,
            epoch=epoch,
            currency0=pool.currency0,
            currency1=pool.currency1,
            amount0=amount0,
            amount1=amount1,
        )
        return self.rebalancer.on_liquidity_removed(event)

    def _require_initialized(self, pool: PoolKey) -> None:
        if pool.pool_id not in self._initialized:
            raise PoolNotInitializedError(f"Pool {pool.pool_id} is not initialized")
