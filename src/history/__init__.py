"""History — хранилища истории пулов (price indicator и комиссии)."""

from .store import (
    MIN_RETAINED_EPOCHS,
    FeeStore,
    IndicatorStore,
    RetentionPolicy,
)
from .indicator_history import InMemoryIndicatorHistory
from .fee_history import InMemoryFeeHistory

__all__ = [
    "MIN_RETAINED_EPOCHS",
    "RetentionPolicy",
    "IndicatorStore",
    "FeeStore",
    "InMemoryIndicatorHistory",
    "InMemoryFeeHistory",
]
