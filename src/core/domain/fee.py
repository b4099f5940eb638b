"""
Fee — Модели направлений сделки и записей комиссий

TradeDirection определяет, какой из двух активов пула трейдер отдаёт.
FeeRecord хранит пару (buy_fee, sell_fee) для (pool, epoch): None означает
"ещё не вычислено", ноль — легитимное значение комиссии.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class TradeDirection(str, Enum):
    """
    Направление сделки (сторона комиссии).

    SELL — трейдер отдаёт currency0, BUY — трейдер отдаёт currency1.
    """

    SELL = "sell"
    BUY = "buy"


class PriceTrend(str, Enum):
    """Направление движения price indicator за (epoch-2, epoch-1)"""

    INCREASING = "increasing"
    NOT_INCREASING = "not_increasing"


# =============================================================================
# FEE RECORD MODEL
# =============================================================================


class FeeRecord(BaseModel):
    """
    Запись комиссий пула за одну epoch.

    Immutable модель (frozen=True): снапшот состояния Fee History.
    Каждая сторона записывается не более одного раза.
    """

    pool_id: str = Field(..., min_length=1, description="Идентификатор пула")
    epoch: int = Field(..., ge=0, description="Epoch записи")
    buy_fee: Optional[int] = Field(None, ge=0, description="Комиссия BUY (ppm), None если не вычислена")
    sell_fee: Optional[int] = Field(None, ge=0, description="Комиссия SELL (ppm), None если не вычислена")

    model_config = {"frozen": True}

    def fee_for(self, side: TradeDirection) -> Optional[int]:
        """
        Комиссия для стороны.

        Args:
            side: Направление сделки

        Returns:
            sell_fee для SELL, buy_fee для BUY
        """
        if side == TradeDirection.SELL:
            return self.sell_fee
        return self.buy_fee

    @property
    def is_complete(self) -> bool:
        """True если вычислены обе стороны."""
        return self.buy_fee is not None and self.sell_fee is not None
