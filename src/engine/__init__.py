"""Engine — Dynamic Fee Engine поверх истории пулов."""

from .config import FeeEngineConfig
from .dynamic_fee_engine import DynamicFeeEngine, FeeQuote
from .locks import KeyedLocks

__all__ = [
    "FeeEngineConfig",
    "DynamicFeeEngine",
    "FeeQuote",
    "KeyedLocks",
]
