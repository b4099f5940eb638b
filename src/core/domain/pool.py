"""
PoolKey — Модель идентификатора пула

Immutable Pydantic модель пула с номинальной комиссией.
Номинальная комиссия может нести маркер динамической комиссии (DYNAMIC_FEE_FLAG):
такой пул получает комиссию от DynamicFeeEngine, а base_fee (номинал без маркера)
используется как fallback при cold start.
"""

from typing import Final

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# КОНСТАНТЫ КОМИССИЙ
# =============================================================================

# Маркер динамической комиссии в номинальном fee пула
DYNAMIC_FEE_FLAG: Final[int] = 0x800000

# Максимальная комиссия (ppm): 1_000_000 = 100%
MAX_LP_FEE: Final[int] = 1_000_000


# =============================================================================
# POOL MODEL
# =============================================================================


class PoolKey(BaseModel):
    """
    Идентификатор пула и его неизменяемая номинальная комиссия.

    Создаётся один раз при setup пула, никогда не изменяется (frozen=True).
    """

    pool_id: str = Field(..., min_length=1, description="Стабильный идентификатор пула")
    currency0: str = Field(..., min_length=1, description="Первый актив пары")
    currency1: str = Field(..., min_length=1, description="Второй актив пары")
    fee: int = Field(..., ge=0, description="Номинальная комиссия (ppm), может нести DYNAMIC_FEE_FLAG")
    tick_spacing: int = Field(default=60, gt=0, description="Шаг тиков пула")

    model_config = {"frozen": True}

    @field_validator("currency1")
    @classmethod
    def validate_distinct_currencies(cls, v: str, info) -> str:
        """Проверка, что активы пары различны"""
        if "currency0" in info.data and info.data["currency0"] == v:
            raise ValueError(f"currency1 must differ from currency0, got {v}")
        return v

    @property
    def is_dynamic_fee(self) -> bool:
        """True если пул запросил динамическую комиссию."""
        return bool(self.fee & DYNAMIC_FEE_FLAG)

    @property
    def base_fee(self) -> int:
        """
        Базовая комиссия: номинал без маркера динамической комиссии.

        Returns:
            fee & ~DYNAMIC_FEE_FLAG
        """
        return self.fee & ~DYNAMIC_FEE_FLAG

    @classmethod
    def dynamic(
        cls,
        pool_id: str,
        currency0: str,
        currency1: str,
        base_fee: int,
        tick_spacing: int = 60,
    ) -> "PoolKey":
        """
        Конструктор пула с динамической комиссией.

        Args:
            pool_id: Идентификатор пула
            currency0: Первый актив
            currency1: Второй актив
            base_fee: Базовая комиссия (ppm)
            tick_spacing: Шаг тиков

        Returns:
            PoolKey с fee = DYNAMIC_FEE_FLAG | base_fee
        """
        return cls(
            pool_id=pool_id,
            currency0=currency0,
            currency1=currency1,
            fee=DYNAMIC_FEE_FLAG | base_fee,
            tick_spacing=tick_spacing,
        )
