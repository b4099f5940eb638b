"""Конфигурация DynamicFeeEngine."""

from dataclasses import dataclass, field

from src.core.domain.pool import MAX_LP_FEE
from src.core.math.fee_derivative import DEFAULT_FEE_STEP_PCT
from src.history.store import RetentionPolicy


@dataclass(frozen=True)
class FeeEngineConfig:
    """Параметры динамической комиссии.

    - step_pct: шаг за epoch в % от средней комиссии прошлой epoch (10 → 10%)
    - max_fee: верхняя граница комиссии (ppm), 100% по умолчанию
    - retention: политика хранения истории для хранилищ по умолчанию
    """
    step_pct: int = DEFAULT_FEE_STEP_PCT
    max_fee: int = MAX_LP_FEE
    retention: RetentionPolicy = field(default_factory=RetentionPolicy)

    def __post_init__(self):
        if not 0 < self.step_pct <= 100:
            raise ValueError(f"step_pct must be in (0, 100], got {self.step_pct}")
        if not 0 < self.max_fee <= MAX_LP_FEE:
            raise ValueError(f"max_fee must be in (0, {MAX_LP_FEE}], got {self.max_fee}")
