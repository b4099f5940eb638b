"""Price-Indicator History — in-memory хранилище price indicator.

Один indicator на (pool, epoch). Внутри epoch допускаются многократные записи,
значимой считается последняя. Engine читает только epoch-1 и epoch-2, поэтому
перезапись текущей epoch никогда не влияет на уже вычисленные комиссии.
"""

import threading
from typing import Dict, Optional

from loguru import logger

from src.core.math.numerical_safeguards import validate_epoch, validate_indicator
from src.history.store import IndicatorStore, RetentionPolicy


class InMemoryIndicatorHistory(IndicatorStore):
    """Price-Indicator History в памяти процесса.

    Хранение: pool_id → {epoch → indicator}. Пулы независимы.
    """

    def __init__(self, retention: Optional[RetentionPolicy] = None):
        """
        Args:
            retention: политика хранения (default: без удаления)
        """
        self.retention = retention or RetentionPolicy()
        self._lock = threading.Lock()
        self._values: Dict[str, Dict[int, int]] = {}
        self._latest_epoch: Dict[str, int] = {}

    def record_indicator(self, pool_id: str, epoch: int, value: int) -> None:
        validate_epoch(epoch)
        validate_indicator(value)

        with self._lock:
            pool_values = self._values.setdefault(pool_id, {})
            pool_values[epoch] = value

            latest = max(epoch, self._latest_epoch.get(pool_id, epoch))
            self._latest_epoch[pool_id] = latest
            self._prune(pool_id, latest)

    def read_indicator(self, pool_id: str, epoch: int) -> Optional[int]:
        if epoch < 0:
            return None
        with self._lock:
            return self._values.get(pool_id, {}).get(epoch)

    def indicators(self, pool_id: str) -> Dict[int, int]:
        with self._lock:
            return dict(self._values.get(pool_id, {}))

    def _prune(self, pool_id: str, latest_epoch: int) -> None:
        """Удаление epoch старше окна retention (вызывается под lock)."""
        cutoff = self.retention.cutoff_epoch(latest_epoch)
        if cutoff is None:
            return

        pool_values = self._values[pool_id]
        expired = [e for e in pool_values if e < cutoff]
        for e in expired:
            del pool_values[e]

        if expired:
            logger.debug(
                "Pruned {} indicator epochs for pool {} (cutoff={})",
                len(expired), pool_id, cutoff,
            )
