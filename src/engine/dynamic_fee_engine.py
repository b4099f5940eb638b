"""Dynamic Fee Engine — асимметричные комиссии BUY/SELL по тренду price indicator.

Алгоритм get_fee(pool, epoch, direction):
1. Cold start: если нет Indicator[epoch-2] (или Indicator[epoch-1]), обе стороны
   epoch фиксируются на base_fee пула (first write wins).
2. Иначе для запрошенной стороны: мемоизированное значение, либо
   - trend = Indicator[epoch-1] > Indicator[epoch-2] (равенство — не рост)
   - prev_buy/prev_sell = FeeRecord[epoch-1], отсутствующая сторона → base_fee
   - delta = floor(avg(prev_buy, prev_sell) * step_pct / 100)
   - BUY растёт с трендом, SELL зеркально; вычитание saturating (>= 0)
   - запись через try_compute_and_store (first write wins)
3. SELL → sell fee, BUY → buy fee.

FeeRecord[epoch] зависит только от epoch-1 и epoch-2: записи indicator текущей
epoch не влияют на уже вычисленные комиссии.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from loguru import logger

from src.core.contracts import validate_pool_history
from src.core.domain.fee import PriceTrend, TradeDirection
from src.core.domain.pool import PoolKey
from src.core.math.fee_derivative import fee_step, next_fee, price_trend
from src.core.math.numerical_safeguards import validate_epoch
from src.engine.config import FeeEngineConfig
from src.engine.locks import KeyedLocks
from src.history.fee_history import InMemoryFeeHistory
from src.history.indicator_history import InMemoryIndicatorHistory
from src.history.store import FeeStore, IndicatorStore

POOL_HISTORY_SCHEMA_VERSION = "1"


@dataclass(frozen=True)
class FeeQuote:
    """Результат запроса комиссии."""

    pool_id: str
    epoch: int
    direction: TradeDirection
    fee: int

    # Диагностика
    cold_start: bool
    memoized: bool
    trend: Optional[PriceTrend]
    delta: Optional[int]

    details: str


class DynamicFeeEngine:
    """Dynamic Fee Engine поверх Price-Indicator History и Fee History.

    Read-compute-write для (pool, epoch, side) выполняется под per-pool lock,
    повторный запрос той же стороны в той же epoch возвращает сохранённое
    значение без пересчёта.
    """

    def __init__(
        self,
        indicator_store: Optional[IndicatorStore] = None,
        fee_store: Optional[FeeStore] = None,
        config: Optional[FeeEngineConfig] = None,
    ):
        """
        Args:
            indicator_store: хранилище price indicator (default: in-memory)
            fee_store: хранилище комиссий (default: in-memory)
            config: параметры engine
        """
        self.config = config or FeeEngineConfig()
        self.indicator_store = indicator_store or InMemoryIndicatorHistory(self.config.retention)
        self.fee_store = fee_store or InMemoryFeeHistory(self.config.retention)
        self._locks = KeyedLocks()

    # =========================================================================
    # WRITE SIDE (price oracle)
    # =========================================================================

    def record_indicator(self, pool_id: str, epoch: int, value: int) -> None:
        """Запись price indicator после settlement сделки (last write wins)."""
        with self._locks.hold(pool_id):
            self.indicator_store.record_indicator(pool_id, epoch, value)

    # =========================================================================
    # FEE QUERY
    # =========================================================================

    def get_fee(self, pool: PoolKey, epoch: int, direction: TradeDirection) -> int:
        """Комиссия (ppm) для сделки в направлении direction в epoch."""
        return self.get_fee_quote(pool, epoch, direction).fee

    def get_fee_quote(
        self, pool: PoolKey, epoch: int, direction: TradeDirection
    ) -> FeeQuote:
        """Комиссия с диагностикой (cold start, мемоизация, тренд, шаг)."""
        validate_epoch(epoch)
        direction = TradeDirection(direction)
        base_fee = self._base_fee(pool)

        with self._locks.hold(pool.pool_id):
            prev_prev_indicator = self.indicator_store.read_indicator(pool.pool_id, epoch - 2)
            prev_indicator = self.indicator_store.read_indicator(pool.pool_id, epoch - 1)

            if prev_prev_indicator is None or prev_indicator is None:
                return self._cold_start(pool, epoch, direction, base_fee)

            trend = price_trend(prev_indicator, prev_prev_indicator)

            stored = self.fee_store.read(pool.pool_id, epoch, direction)
            if stored is not None:
                logger.bind(pool_id=pool.pool_id, epoch=epoch).debug(
                    "Memoized {} fee {}", direction.value, stored
                )
                return FeeQuote(
                    pool_id=pool.pool_id,
                    epoch=epoch,
                    direction=direction,
                    fee=stored,
                    cold_start=False,
                    memoized=True,
                    trend=trend,
                    delta=None,
                    details=f"memoized {direction.value} fee for epoch {epoch}",
                )

            prev_record = self.fee_store.read_record(pool.pool_id, epoch - 1)
            prev_buy = prev_record.buy_fee if prev_record.buy_fee is not None else base_fee
            prev_sell = prev_record.sell_fee if prev_record.sell_fee is not None else base_fee

            delta = fee_step(prev_buy, prev_sell, self.config.step_pct)
            prev_fee = prev_sell if direction == TradeDirection.SELL else prev_buy
            new_fee = next_fee(direction, prev_fee, delta, trend, self.config.max_fee)

            if new_fee == 0 and prev_fee < delta:
                logger.bind(pool_id=pool.pool_id, epoch=epoch).warning(
                    "{} fee clamped at zero: prev={} delta={}",
                    direction.value, prev_fee, delta,
                )

            stored = self.fee_store.try_compute_and_store(
                pool.pool_id, epoch, direction, new_fee
            )

            logger.bind(pool_id=pool.pool_id, epoch=epoch).debug(
                "Computed {} fee {} (prev={}, delta={}, trend={})",
                direction.value, stored, prev_fee, delta, trend.value,
            )

            return FeeQuote(
                pool_id=pool.pool_id,
                epoch=epoch,
                direction=direction,
                fee=stored,
                cold_start=False,
                memoized=stored != new_fee,
                trend=trend,
                delta=delta,
                details=(
                    f"{direction.value}: {prev_fee} -> {stored}, delta={delta}, "
                    f"trend={trend.value}"
                ),
            )

    def _cold_start(
        self, pool: PoolKey, epoch: int, direction: TradeDirection, base_fee: int
    ) -> FeeQuote:
        """Недостаточно истории для тренда: обе стороны epoch = base_fee."""
        already_stored = self.fee_store.read(pool.pool_id, epoch, direction) is not None

        buy_fee = self.fee_store.try_compute_and_store(
            pool.pool_id, epoch, TradeDirection.BUY, base_fee
        )
        sell_fee = self.fee_store.try_compute_and_store(
            pool.pool_id, epoch, TradeDirection.SELL, base_fee
        )
        fee = sell_fee if direction == TradeDirection.SELL else buy_fee

        if not already_stored:
            logger.bind(pool_id=pool.pool_id, epoch=epoch).debug(
                "Cold start: base fee {} for both sides", base_fee
            )

        return FeeQuote(
            pool_id=pool.pool_id,
            epoch=epoch,
            direction=direction,
            fee=fee,
            cold_start=True,
            memoized=already_stored,
            trend=None,
            delta=None,
            details=f"cold start: insufficient indicator history before epoch {epoch}",
        )

    def _base_fee(self, pool: PoolKey) -> int:
        base_fee = pool.base_fee
        if base_fee > self.config.max_fee:
            raise ValueError(
                f"Pool {pool.pool_id} base fee {base_fee} exceeds max_fee {self.config.max_fee}"
            )
        return base_fee

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def get_indicator(self, pool_id: str, epoch: int) -> Optional[int]:
        return self.indicator_store.read_indicator(pool_id, epoch)

    def get_buy_fee(self, pool_id: str, epoch: int) -> Optional[int]:
        return self.fee_store.read(pool_id, epoch, TradeDirection.BUY)

    def get_sell_fee(self, pool_id: str, epoch: int) -> Optional[int]:
        return self.fee_store.read(pool_id, epoch, TradeDirection.SELL)

    def export_pool_history(self, pool_id: str) -> Dict[str, Any]:
        """
        JSON-совместимый снапшот истории пула.

        Returns:
            dict, соответствующий контракту pool_history

        Raises:
            ValidationError: Если снапшот нарушает контракт
        """
        with self._locks.hold(pool_id):
            indicators = self.indicator_store.indicators(pool_id)
            records = self.fee_store.records(pool_id)

        snapshot = {
            "schema_version": POOL_HISTORY_SCHEMA_VERSION,
            "pool_id": pool_id,
            "indicators": [
                {"epoch": epoch, "value": value}
                for epoch, value in sorted(indicators.items())
            ],
            "fees": [
                record.model_dump(include={"epoch", "buy_fee", "sell_fee"})
                for _, record in sorted(records.items())
            ],
        }
        validate_pool_history(snapshot)
        return snapshot
