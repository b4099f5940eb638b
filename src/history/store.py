"""Store contracts — контракты хранилищ истории пулов.

Два хранилища, ключ (pool_id, epoch):
- IndicatorStore: один price indicator на (pool, epoch), last write wins
- FeeStore: одна комиссия на (pool, epoch, side), first write wins

Транспорт и durable persistence вне модуля: любая реализация обязана
соблюдать только контракт чтения/записи ниже. Отсутствие значения
выражается через None, ноль — легитимное значение.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Final, Optional

from src.core.domain.fee import FeeRecord, TradeDirection

# Engine читает E, E-1, E-2: меньшее окно ломает расчёт
MIN_RETAINED_EPOCHS: Final[int] = 3


@dataclass(frozen=True)
class RetentionPolicy:
    """Политика хранения истории пула.

    keep_epochs=None — хранить всё (unbounded growth).
    keep_epochs=N — хранить только последние N epoch относительно
    самой свежей записанной epoch пула.
    """
    keep_epochs: Optional[int] = None

    def __post_init__(self):
        if self.keep_epochs is not None and self.keep_epochs < MIN_RETAINED_EPOCHS:
            raise ValueError(
                f"keep_epochs must be >= {MIN_RETAINED_EPOCHS}, got {self.keep_epochs}"
            )

    def cutoff_epoch(self, latest_epoch: int) -> Optional[int]:
        """Первая сохраняемая epoch, None если удалять нечего."""
        if self.keep_epochs is None:
            return None
        cutoff = latest_epoch - self.keep_epochs + 1
        return cutoff if cutoff > 0 else None


class IndicatorStore(ABC):
    """Контракт Price-Indicator History."""

    @abstractmethod
    def record_indicator(self, pool_id: str, epoch: int, value: int) -> None:
        """Перезапись indicator для (pool, epoch), last write wins."""

    @abstractmethod
    def read_indicator(self, pool_id: str, epoch: int) -> Optional[int]:
        """Indicator для (pool, epoch) или None."""

    @abstractmethod
    def indicators(self, pool_id: str) -> Dict[int, int]:
        """Копия всех сохранённых indicator пула (epoch → value)."""


class FeeStore(ABC):
    """Контракт Fee History."""

    @abstractmethod
    def try_compute_and_store(
        self, pool_id: str, epoch: int, side: TradeDirection, value: int
    ) -> int:
        """Записать value если слот пуст; вернуть значение, оказавшееся в слоте."""

    @abstractmethod
    def read(self, pool_id: str, epoch: int, side: TradeDirection) -> Optional[int]:
        """Комиссия для (pool, epoch, side) или None."""

    @abstractmethod
    def records(self, pool_id: str) -> Dict[int, FeeRecord]:
        """Копия всех записей пула (epoch → FeeRecord)."""

    def read_record(self, pool_id: str, epoch: int) -> FeeRecord:
        """Обе стороны (pool, epoch) одним снапшотом."""
        return FeeRecord(
            pool_id=pool_id,
            epoch=epoch,
            buy_fee=self.read(pool_id, epoch, TradeDirection.BUY),
            sell_fee=self.read(pool_id, epoch, TradeDirection.SELL),
        )
