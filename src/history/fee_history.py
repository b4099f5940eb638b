"""Fee History — in-memory хранилище вычисленных комиссий.

Append-only: каждая сторона (pool, epoch, side) записывается не более одного
раза. try_compute_and_store — примитив мемоизации (compare-and-set): первая
успешная запись авторитетна, последующие возвращают уже сохранённое значение.
"""

import threading
from typing import Dict, Optional, Tuple

from loguru import logger

from src.core.domain.fee import FeeRecord, TradeDirection
from src.core.math.numerical_safeguards import validate_epoch, validate_non_negative_int
from src.history.store import FeeStore, RetentionPolicy


class InMemoryFeeHistory(FeeStore):
    """Fee History в памяти процесса.

    Хранение: pool_id → {(epoch, side) → fee}. Отсутствие ключа = "не вычислено".
    """

    def __init__(self, retention: Optional[RetentionPolicy] = None):
        self.retention = retention or RetentionPolicy()
        self._lock = threading.Lock()
        self._fees: Dict[str, Dict[Tuple[int, TradeDirection], int]] = {}
        self._latest_epoch: Dict[str, int] = {}

    def try_compute_and_store(
        self, pool_id: str, epoch: int, side: TradeDirection, value: int
    ) -> int:
        validate_epoch(epoch)
        validate_non_negative_int(value, "fee")
        side = TradeDirection(side)

        with self._lock:
            pool_fees = self._fees.setdefault(pool_id, {})
            key = (epoch, side)

            stored = pool_fees.get(key)
            if stored is not None:
                return stored

            pool_fees[key] = value

            latest = max(epoch, self._latest_epoch.get(pool_id, epoch))
            self._latest_epoch[pool_id] = latest
            self._prune(pool_id, latest)
            return value

    def read(self, pool_id: str, epoch: int, side: TradeDirection) -> Optional[int]:
        if epoch < 0:
            return None
        with self._lock:
            return self._fees.get(pool_id, {}).get((epoch, TradeDirection(side)))

    def records(self, pool_id: str) -> Dict[int, FeeRecord]:
        with self._lock:
            pool_fees = dict(self._fees.get(pool_id, {}))

        epochs = sorted({epoch for epoch, _ in pool_fees})
        return {
            epoch: FeeRecord(
                pool_id=pool_id,
                epoch=epoch,
                buy_fee=pool_fees.get((epoch, TradeDirection.BUY)),
                sell_fee=pool_fees.get((epoch, TradeDirection.SELL)),
            )
            for epoch in epochs
        }

    def _prune(self, pool_id: str, latest_epoch: int) -> None:
        cutoff = self.retention.cutoff_epoch(latest_epoch)
        if cutoff is None:
            return

        pool_fees = self._fees[pool_id]
        expired = [key for key in pool_fees if key[0] < cutoff]
        for key in expired:
            del pool_fees[key]

        if expired:
            logger.debug(
                "Pruned {} fee slots for pool {} (cutoff={})",
                len(expired), pool_id, cutoff,
            )
